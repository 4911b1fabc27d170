"""Trailing-edge debouncing on the running asyncio loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any


class Debouncer:
    """Delay a callback until calls stop arriving for ``delay`` seconds.

    Each :meth:`call` cancels the pending timer and schedules a new one, so
    only the arguments of the last call in a burst reach the callback.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]):
        self.delay = delay
        self.callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, *args: Any) -> None:
        """Schedule the callback; must run inside an event loop."""
        self.cancel()
        self._args = args
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the pending callback now instead of waiting for the timer."""
        if self._handle is not None:
            self.cancel()
            self.callback(*self._args)

    def _fire(self) -> None:
        self._handle = None
        self.callback(*self._args)
