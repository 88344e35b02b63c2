"""
Namespaced event channel for "the view changed" notifications.

Listeners register under `"<type>.<name>"` (e.g. `"drawn.info-measurement"`), so
several widgets can listen to the same event type without replacing each other.
Registering `None` under a key removes that listener.

Work queued with `call_soon` runs on the next turn (`run_pending`), never inside the
callback that queued it.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _split(typename: str) -> tuple[str, str]:
    event_type, _, name = typename.partition(".")
    if not event_type:
        raise ValueError(f"Invalid listener key '{typename}', expected TYPE[.NAME]")
    return event_type, name


class ViewSignal:
    def __init__(self) -> None:
        self._listeners: dict[str, dict[str, Listener]] = {}
        self._pending: deque[Listener] = deque()

    def on(self, typename: str, callback: Listener | None) -> None:
        event_type, name = _split(typename)
        listeners = self._listeners.setdefault(event_type, {})
        if callback is None:
            listeners.pop(name, None)
            if not listeners:
                del self._listeners[event_type]
        else:
            listeners[name] = callback

    def listeners(self, event_type: str) -> list[str]:
        """Names currently registered for an event type."""
        return list(self._listeners.get(event_type, {}))

    def emit(self, event_type: str) -> None:
        for callback in list(self._listeners.get(event_type, {}).values()):
            callback()

    def call_soon(self, callback: Listener) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        """Run work queued before this call; returns how many callbacks ran."""
        count = len(self._pending)
        for _ in range(count):
            self._pending.popleft()()
        if count:
            logger.debug("Ran %d deferred callback(s)", count)
        return count
