from __future__ import annotations

import asyncio
from dataclasses import dataclass

from utils.constants import MESSAGE_KINDS


@dataclass(slots=True, frozen=True)
class StatusMessage:
    kind: str
    text: str


class MessageSlot:
    """Holds at most one transient status message.

    A message clears itself ``ttl_seconds`` after it was shown. Showing a new
    message replaces the current one and cancels its pending clear.
    """

    def __init__(self, ttl_seconds: float) -> None:
        self.ttl_seconds = ttl_seconds
        self._current: StatusMessage | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def current(self) -> StatusMessage | None:
        return self._current

    def show(self, kind: str, text: str) -> StatusMessage:
        if kind not in MESSAGE_KINDS:
            raise ValueError(f"Unknown message kind: {kind}")
        self._cancel_timer()
        message = StatusMessage(kind=kind, text=text)
        self._current = message
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Without a running loop there is nothing to schedule against; the
            # message stays until replaced or cleared.
            return message
        self._timer = loop.call_later(self.ttl_seconds, self._expire, message)
        return message

    def clear(self) -> None:
        self._cancel_timer()
        self._current = None

    def _expire(self, message: StatusMessage) -> None:
        if self._current is message:
            self._current = None
        self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
