from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from ..services import ServiceContext, VacationQueryEngine


@dataclass(slots=True)
class ApiState:
    """Holds the single engine instance shared by every binding and session.

    The context is built on first use from settings, unless one was bound
    explicitly beforehand.
    """

    _context: Optional[ServiceContext] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def bind(self, context: ServiceContext) -> ServiceContext:
        with self._lock:
            self._context = context
        return context

    def reset(self) -> None:
        with self._lock:
            self._context = None

    @property
    def context(self) -> ServiceContext:
        if self._context is None:
            with self._lock:
                if self._context is None:
                    self._context = ServiceContext()
        return self._context

    @property
    def engine(self) -> VacationQueryEngine:
        return self.context.engine


api_state = ApiState()
