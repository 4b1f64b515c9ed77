"""Per-note debouncing of move events on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from folder_tags.constants import MOVE_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)

MoveCallback = Callable[[str, str], Any]


@dataclass
class _Burst:
    origin: str
    handle: asyncio.TimerHandle
    waiters: list[asyncio.Future] = field(default_factory=list)


class MoveDebouncer:
    """Collapse rapid moves of the same note into one callback.

    A move ``A -> B`` followed within the delay by ``B -> C`` resets the timer
    and fires once with ``("C", "A")``. Every caller of the burst receives the
    callback's result (or its exception).
    """

    def __init__(self, delay: float = MOVE_DEBOUNCE_SECONDS) -> None:
        self.delay = delay
        self._bursts: dict[str, _Burst] = {}

    def submit(self, note: str, old_note: str, callback: MoveCallback) -> asyncio.Future:
        """Schedule ``callback(note, origin)``; must be called from a running loop."""
        loop = asyncio.get_running_loop()
        origin = old_note
        waiters: list[asyncio.Future] = []

        burst = self._bursts.pop(old_note, None) or self._bursts.pop(note, None)
        if burst is not None:
            burst.handle.cancel()
            origin = burst.origin
            waiters = burst.waiters
            logger.debug("Debounced move of '%s' (origin '%s')", note, origin)

        waiter = loop.create_future()
        waiters.append(waiter)
        handle = loop.call_later(self.delay, self._fire, note, callback)
        self._bursts[note] = _Burst(origin, handle, waiters)
        return waiter

    def _fire(self, note: str, callback: MoveCallback) -> None:
        burst = self._bursts.pop(note, None)
        if burst is None:
            return
        try:
            result = callback(note, burst.origin)
        except Exception as exc:
            logger.exception("Move reconciliation failed for '%s'", note)
            for waiter in burst.waiters:
                if not waiter.done():
                    waiter.set_exception(exc)
            return
        for waiter in burst.waiters:
            if not waiter.done():
                waiter.set_result(result)

    def cancel_all(self) -> None:
        for burst in self._bursts.values():
            burst.handle.cancel()
            for waiter in burst.waiters:
                waiter.cancel()
        self._bursts.clear()

    def __len__(self) -> int:
        return len(self._bursts)
