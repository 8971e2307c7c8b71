from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import AppSettings, get_settings
from ..data import CalendarTable
from .vacations import VacationQueryEngine


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root sharing settings, the loaded table, and the query engine."""

    settings: AppSettings = field(default_factory=get_settings)
    table: Optional[CalendarTable] = None
    engine: VacationQueryEngine = field(init=False)

    def __post_init__(self) -> None:
        if self.table is None:
            dataset = self.settings.dataset
            self.table = CalendarTable.load(dataset.path, encoding=dataset.encoding)
        self.engine = VacationQueryEngine(self.table)
