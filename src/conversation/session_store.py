"""
In-memory session store keyed by chat user identifier.

Sessions are created lazily, reset on demand, and dropped after an
inactivity window so a long-running process does not accumulate every
user it has ever seen. Expired sessions are swept on access, at most
once every half TTL. Each user also gets an ``asyncio.Lock`` that the
dialogue engine holds for the duration of a turn; sessions whose lock is
held are never evicted.

Usage:
    store = InMemorySessionStore(idle_ttl_seconds=1800)
    session = store.get("59160012345")
    async with store.lock("59160012345"):
        ...
    store.reset("59160012345")
"""

import asyncio
import time
from collections import OrderedDict
from typing import Callable, Optional

from src.config import settings
from src.logging_context import get_conversation_logger
from src.schemas.session_schema import Session

logger = get_conversation_logger(__name__)


class InMemorySessionStore:
    """
    Process-local session map with idle eviction.

    The store is injected into the dialogue engine, so it can be swapped
    for a shared store (e.g. Redis) with the same ``get``/``reset``/``lock``
    surface without touching the state machine.
    """

    def __init__(
        self,
        idle_ttl_seconds: Optional[int] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = settings.sessions.idle_ttl_seconds if idle_ttl_seconds is None else idle_ttl_seconds
        self._max_sessions = settings.sessions.max_sessions if max_sessions is None else max_sessions
        self._clock = clock
        self._last_sweep = clock()
        # Ordered by last access, oldest first
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def get(self, user_id: str) -> Session:
        """Return the user's session, creating a fresh one if absent or expired."""
        now = self._clock()
        self._maybe_sweep(now)
        session = self._sessions.get(user_id)
        if session is not None and self._is_expired(session, now):
            logger.debug("Session for %s expired after %ss idle", user_id, self._ttl)
            session = None
        if session is None:
            return self._store(user_id, Session(), now)
        session.touched_at = now
        self._sessions.move_to_end(user_id)
        return session

    def reset(self, user_id: str) -> Session:
        """Overwrite the user's session with the default idle state."""
        return self._store(user_id, Session(), self._clock())

    def lock(self, user_id: str) -> asyncio.Lock:
        """Per-user lock serialising turns of the same conversation."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def evict_expired(self) -> int:
        """Drop every idle session older than the TTL. Returns the number removed."""
        return self._sweep(self._clock())

    def _maybe_sweep(self, now: float) -> None:
        if self._ttl > 0 and now - self._last_sweep >= self._ttl / 2:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        self._last_sweep = now
        if self._ttl <= 0:
            return 0
        expired = [
            uid for uid, s in self._sessions.items()
            if self._is_expired(s, now) and not self._in_turn(uid)
        ]
        for uid in expired:
            self._drop(uid)
        if expired:
            logger.info("Evicted %d idle sessions", len(expired))
        return len(expired)

    def _store(self, user_id: str, session: Session, now: float) -> Session:
        session.touched_at = now
        self._sessions[user_id] = session
        self._sessions.move_to_end(user_id)
        while len(self._sessions) > self._max_sessions:
            victim = next(
                (uid for uid in self._sessions if uid != user_id and not self._in_turn(uid)),
                None,
            )
            if victim is None:
                logger.warning(
                    "Session cap %d exceeded, every other session has a turn in progress",
                    self._max_sessions,
                )
                break
            logger.warning("Session cap %d reached, evicting %s", self._max_sessions, victim)
            self._drop(victim)
        return session

    def _in_turn(self, user_id: str) -> bool:
        lock = self._locks.get(user_id)
        return lock is not None and lock.locked()

    def _drop(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)
        if not self._in_turn(user_id):
            self._locks.pop(user_id, None)

    def _is_expired(self, session: Session, now: float) -> bool:
        return self._ttl > 0 and now - session.touched_at > self._ttl
