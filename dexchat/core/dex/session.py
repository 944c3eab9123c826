"""
Pending-quote store keyed by conversation id.

One tool instance may serve many conversations, so each conversation gets its
own slot. Reads and writes go through an asyncio lock; a quote older than the
TTL is dropped on read.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Optional

from .errors import NoPendingQuoteError, QuoteExpiredError
from .models import PendingSession

DEFAULT_CONVERSATION_ID = "default"


class QuoteSessionStore:
    """In-memory pending quotes with optional expiry."""

    def __init__(
        self,
        ttl_seconds: int = 300,
        *,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, PendingSession] = {}
        self._lock = asyncio.Lock()
        self._logger = logger or logging.getLogger(__name__)

    def __len__(self) -> int:
        return len(self._sessions)

    def _is_expired(self, session: PendingSession) -> bool:
        if self.ttl_seconds <= 0:
            return False
        return session.age_seconds(self._clock()) > self.ttl_seconds

    async def put(self, conversation_id: str, session: PendingSession) -> None:
        """Store a quote, replacing any quote already pending for the conversation."""
        async with self._lock:
            session.created_at = self._clock()
            replaced = conversation_id in self._sessions
            self._sessions[conversation_id] = session
        self._logger.info(
            "Stored pending quote for %s (replaced=%s)", conversation_id, replaced,
        )

    async def get(self, conversation_id: str) -> Optional[PendingSession]:
        async with self._lock:
            session = self._sessions.get(conversation_id)
            if session is None:
                return None
            if self._is_expired(session):
                del self._sessions[conversation_id]
                return None
            return session

    async def require(self, conversation_id: str) -> PendingSession:
        """Return the pending quote or raise NoPendingQuoteError/QuoteExpiredError."""
        async with self._lock:
            session = self._sessions.get(conversation_id)
            if session is None:
                raise NoPendingQuoteError()
            if self._is_expired(session):
                del self._sessions[conversation_id]
                raise QuoteExpiredError(session.age_seconds(self._clock()))
            return session

    async def discard(self, conversation_id: str, session: Optional[PendingSession] = None) -> bool:
        """Drop the pending quote; with ``session`` given, only if it is still the current one."""
        async with self._lock:
            current = self._sessions.get(conversation_id)
            if current is None:
                return False
            if session is not None and current is not session:
                return False
            del self._sessions[conversation_id]
            return True

    async def clear(self) -> None:
        async with self._lock:
            self._sessions.clear()
