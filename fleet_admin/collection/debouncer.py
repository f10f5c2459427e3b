import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

__all__ = ["DebounceState", "FilterDebouncer"]

logger = logging.getLogger(__name__)


class DebounceState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"


class FilterDebouncer:
    """Delay a free-text filter value until typing stops.

    Every `input()` (re)starts a timer of `delay` seconds. When it expires the
    value is passed to `commit`. Values not longer than `min_length` commit
    as the empty string, so that very short search terms don't filter.

    The timer runs on the current asyncio event loop.
    """

    def __init__(
        self,
        commit: Callable[[str], Any],
        delay: float = 1.0,
        min_length: int = 2,
    ):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._commit = commit
        self.delay = delay
        self.min_length = min_length
        self.state = DebounceState.IDLE
        self.value = ""
        self.committed: str | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def validation_error(self) -> str | None:
        """The message to show next to the input, if any."""
        if 0 < len(self.value) < self.min_length:
            return f"Minimum length: {self.min_length}"
        return None

    def input(self, value: str) -> None:
        self.value = value
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.delay, self._expire)
        self.state = DebounceState.PENDING

    def flush(self) -> None:
        """Commit a pending value right away."""
        if self.state is DebounceState.PENDING:
            self._expire()

    def cancel(self) -> None:
        """Drop a pending value without committing it."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self.state is DebounceState.PENDING:
            self.state = DebounceState.IDLE

    def _expire(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        value = "" if len(self.value) <= self.min_length else self.value
        self.state = DebounceState.COMMITTED
        self.committed = value
        logger.debug(f"committing filter value {value!r}")
        self._commit(value)
