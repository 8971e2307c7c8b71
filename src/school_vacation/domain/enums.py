from __future__ import annotations

from enum import Enum
from typing import Dict

from .errors import UnknownRegionError


class Region(str, Enum):
    FLANDERS = "flanders"
    WALLONIA = "wallonia"
    NORTH_NETHERLANDS = "north-netherlands"
    MIDDLE_NETHERLANDS = "middle-netherlands"
    SOUTH_NETHERLANDS = "south-netherlands"
    LUXEMBOURG = "luxembourg"

    @classmethod
    def resolve(cls, value: str) -> "Region":
        """Map a case-insensitive region name or localized alias to a Region."""

        key = value.strip().lower() if isinstance(value, str) else ""
        try:
            return REGION_ALIASES[key]
        except KeyError:
            raise UnknownRegionError(value) from None


class Country(str, Enum):
    BELGIUM = "belgium"
    NETHERLANDS = "netherlands"
    LUXEMBOURG = "luxembourg"


REGION_ALIASES: Dict[str, Region] = {
    "flanders": Region.FLANDERS,
    "vlaanderen": Region.FLANDERS,
    "wallonia": Region.WALLONIA,
    "wallonië": Region.WALLONIA,
    "north-netherlands": Region.NORTH_NETHERLANDS,
    "noord-nederland": Region.NORTH_NETHERLANDS,
    "middle-netherlands": Region.MIDDLE_NETHERLANDS,
    "midden-nederland": Region.MIDDLE_NETHERLANDS,
    "south-netherlands": Region.SOUTH_NETHERLANDS,
    "zuid-nederland": Region.SOUTH_NETHERLANDS,
    "luxembourg": Region.LUXEMBOURG,
}

REGION_NAMES = [region.value for region in Region]
