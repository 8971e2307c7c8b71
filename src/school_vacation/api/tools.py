from __future__ import annotations

from typing import Annotated, Any, Dict, Optional, Union

from pydantic import Field

from ..domain import REGION_NAMES
from ..domain.models import periods_to_dicts
from ..services import VacationQueryEngine
from .registry import register_api
from .state import api_state

MIN_YEAR = 2019
MAX_YEAR = 2028

Year = Annotated[int, Field(ge=MIN_YEAR, le=MAX_YEAR)]


@register_api(
    "check_school_vacation",
    description="Check if a specific date is a school vacation day in a given region",
    category="vacations",
    tags=("lookup",),
)
def check_school_vacation(
    date: Annotated[str, Field(description='Date in DD/MM/YYYY format (e.g., "01/01/2019")')],
    region: Annotated[
        str,
        Field(
            description=f"Region to check ({', '.join(REGION_NAMES)})",
            json_schema_extra={"enum": REGION_NAMES},
        ),
    ],
) -> Dict[str, Any]:
    is_vacation = api_state.engine.is_vacation_day(date, region)
    verdict = "is" if is_vacation else "is not"
    return {
        "date": date,
        "region": region,
        "isSchoolVacation": is_vacation,
        "message": f"{date} {verdict} a school vacation day in {region}",
    }


@register_api(
    "get_vacation_periods",
    description="Get all school vacation periods for a region, optionally filtered by year",
    category="vacations",
    tags=("periods",),
)
def get_vacation_periods(
    region: Annotated[
        str,
        Field(
            description="Region to get vacation periods for",
            json_schema_extra={"enum": REGION_NAMES},
        ),
    ],
    year: Annotated[
        Optional[Year],
        Field(description=f"Optional year to filter vacation periods ({MIN_YEAR}-{MAX_YEAR})"),
    ] = None,
) -> Dict[str, Any]:
    periods = api_state.engine.list_vacation_periods(region, year)
    label: Union[int, str] = year if year is not None else "all years"
    return {
        "region": region,
        "year": label,
        "vacationPeriods": periods_to_dicts(periods),
        "totalPeriods": len(periods),
    }


@register_api(
    "get_supported_regions",
    description="Get list of all supported regions for school vacation lookups",
    category="meta",
    tags=("regions",),
)
def get_supported_regions() -> Dict[str, Any]:
    regions = VacationQueryEngine.list_supported_regions()
    return {
        "supportedRegions": [region.value for region in regions],
        "description": "These are the available regions for school vacation lookups",
    }
