"""
Server-side Session Store.

Associates an opaque session id (the only thing sent to the browser, as a
cookie) with the Salesforce instance URL and access token of that user.
Sessions expire after a sliding TTL: every successful ``resolve`` pushes the
expiry forward.
"""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from newbee_match.core.logging_config import get_logger

logger = get_logger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or expired."""


class SessionData(BaseModel):
    session_id: str
    instance_url: str
    access_token: str
    created_at: float
    last_seen: float


class InMemorySessionStore:
    """Process-local session store with sliding expiry."""

    def __init__(self, ttl_seconds: int = 8 * 60 * 60, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def create(self, instance_url: str, access_token: str) -> str:
        self.purge_expired()
        now = self._clock()
        session_id = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[session_id] = SessionData(
                session_id=session_id,
                instance_url=instance_url,
                access_token=access_token,
                created_at=now,
                last_seen=now,
            )
        logger.info(f"Session created for {instance_url}")
        return session_id

    def resolve(self, session_id: Optional[str]) -> SessionData:
        if not session_id:
            raise SessionNotFoundError("missing session id")
        now = self._clock()
        with self._lock:
            data = self._sessions.get(session_id)
            if data is None:
                raise SessionNotFoundError("unknown session id")
            if now - data.last_seen > self.ttl_seconds:
                del self._sessions[session_id]
                logger.info("Session expired")
                raise SessionNotFoundError("session expired")
            data.last_seen = now
            return data.model_copy()

    def destroy(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Session destroyed")

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [sid for sid, data in self._sessions.items() if now - data.last_seen > self.ttl_seconds]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.debug(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_session_store: Optional[InMemorySessionStore] = None


def get_session_store() -> InMemorySessionStore:
    global _session_store
    if _session_store is None:
        from newbee_match.server.core.config import settings

        _session_store = InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
    return _session_store
