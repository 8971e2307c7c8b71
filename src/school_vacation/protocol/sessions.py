from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from ..domain import InvalidSessionError
from .jsonrpc import McpProtocolHandler, Message, is_initialize_request

logger = logging.getLogger(__name__)

MISSING_SESSION_MESSAGE = "Bad Request: No valid session ID provided"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class McpSession:
    """Protocol-handling context bound to one client connection."""

    session_id: str
    protocol: McpProtocolHandler
    created_at: datetime = field(default_factory=_utc_now)
    last_seen_at: datetime = field(default_factory=_utc_now)
    client_info: Dict[str, Any] = field(default_factory=dict)
    protocol_version: Optional[str] = None
    initialized: bool = False
    request_count: int = 0

    def handle(self, message: Any) -> Optional[Message]:
        self.last_seen_at = _utc_now()
        self.request_count += 1
        return self.protocol.handle(message, session=self)

    def describe(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "createdAt": self.created_at.isoformat(),
            "lastSeenAt": self.last_seen_at.isoformat(),
            "clientInfo": self.client_info,
            "protocolVersion": self.protocol_version,
            "initialized": self.initialized,
            "requestCount": self.request_count,
        }


class SessionRegistry:
    """Maps session identifiers to live :class:`McpSession` contexts.

    Every session shares the same protocol handler and the same read-only
    engine. Only the session map is mutable; it is guarded by a single lock.
    """

    def __init__(
        self,
        protocol: McpProtocolHandler,
        *,
        id_factory: Callable[[], str] = lambda: uuid4().hex,
    ) -> None:
        self._protocol = protocol
        self._id_factory = id_factory
        self._sessions: Dict[str, McpSession] = {}
        self._lock = threading.Lock()

    @property
    def protocol(self) -> McpProtocolHandler:
        return self._protocol

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def sessions(self) -> List[McpSession]:
        with self._lock:
            return list(self._sessions.values())

    def create(self) -> McpSession:
        """Build a context with a fresh identifier; it is not registered yet."""

        return McpSession(session_id=self._id_factory(), protocol=self._protocol)

    def register(self, session: McpSession) -> McpSession:
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Session initialized with ID: %s", session.session_id)
        return session

    def lookup(self, session_id: Optional[str]) -> McpSession:
        if not session_id:
            raise InvalidSessionError(MISSING_SESSION_MESSAGE)
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise InvalidSessionError(f"Unknown session: {session_id}", session_id=session_id)
        return session

    def close(self, session_id: Optional[str], *, reason: str = "client request") -> McpSession:
        if not session_id:
            raise InvalidSessionError(MISSING_SESSION_MESSAGE)
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise InvalidSessionError(f"Unknown session: {session_id}", session_id=session_id)
        logger.info("Session closed: %s (%s)", session_id, reason)
        return session

    def close_all(self, *, reason: str) -> int:
        with self._lock:
            closed = list(self._sessions)
            self._sessions.clear()
        for session_id in closed:
            logger.info("Session closed: %s (%s)", session_id, reason)
        return len(closed)

    def route(
        self, message: Any, session_id: Optional[str]
    ) -> Tuple[Optional[McpSession], Optional[Message]]:
        """Deliver ``message`` to the session it belongs to.

        A request without a session id is accepted only when it is an
        ``initialize`` request; the new session is registered once
        initialization succeeds. Any other id must name a live session.
        """

        if session_id:
            session = self.lookup(session_id)
            return session, session.handle(message)

        if not is_initialize_request(message):
            raise InvalidSessionError(MISSING_SESSION_MESSAGE)

        session = self.create()
        response = session.handle(message)
        if response is not None and "error" in response:
            logger.warning("Initialization failed; session %s discarded", session.session_id)
            return None, response
        self.register(session)
        return session, response
