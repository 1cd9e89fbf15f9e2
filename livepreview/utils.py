"""
Utility functions for the live preview engine.
"""

import asyncio
from typing import Any, Callable, Optional


class Debouncer:
    """
    Delay a callback until input has been quiet for ``delay`` seconds.

    Each ``call`` cancels the pending one; only the last value is delivered.
    Must be used from within a running event loop.
    """

    def __init__(self, callback: Callable[[Any], None], delay: float = 0.3):
        self.callback = callback
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, value: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any) -> None:
        self._handle = None
        self.callback(value)
