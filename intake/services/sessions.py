from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from uuid import uuid4

from services.wizard import WizardController
from services.workspace import TicketWorkspace


@dataclass(slots=True)
class BrowserSession:
    id: str
    wizard: WizardController
    workspace: TicketWorkspace


@dataclass(slots=True)
class _SessionEntry:
    session: BrowserSession
    expires_at: float | None


class SessionStore:
    """In-memory browser sessions with a sliding TTL."""

    def __init__(self, factory: Callable[[str], BrowserSession], ttl_seconds: int | None = None) -> None:
        self._factory = factory
        self._ttl = ttl_seconds
        self._store: dict[str, _SessionEntry] = {}
        self._lock = asyncio.Lock()

    def _is_expired(self, entry: _SessionEntry) -> bool:
        if entry.expires_at is None:
            return False
        return time.time() >= entry.expires_at

    def _expiry(self) -> float | None:
        return time.time() + self._ttl if self._ttl else None

    def _purge_expired(self) -> None:
        stale = [key for key, entry in self._store.items() if self._is_expired(entry)]
        for key in stale:
            self._store.pop(key, None)

    async def get(self, session_id: str | None) -> BrowserSession | None:
        if not session_id:
            return None
        async with self._lock:
            entry = self._store.get(session_id)
            if not entry:
                return None
            if self._is_expired(entry):
                self._store.pop(session_id, None)
                return None
            entry.expires_at = self._expiry()
            return entry.session

    async def get_or_create(self, session_id: str | None) -> BrowserSession:
        existing = await self.get(session_id)
        if existing is not None:
            return existing
        async with self._lock:
            self._purge_expired()
            session = self._factory(str(uuid4()))
            self._store[session.id] = _SessionEntry(session=session, expires_at=self._expiry())
            return session

    async def close(self) -> None:
        async with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
