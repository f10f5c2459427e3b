# (c) Nelen & Schuurmans

import asyncio
from weakref import WeakSet

from .exceptions import Cancelled

__all__ = ["CancellationToken"]


class CancellationToken:
    """Signal that a caller is no longer interested in an operation.

    Cancelling a token cancels all of its children. A child created from an
    already cancelled token starts out cancelled.
    """

    def __init__(self, parent: "CancellationToken | None" = None):
        self._event = asyncio.Event()
        self._children: WeakSet[CancellationToken] = WeakSet()
        if parent is not None:
            parent._children.add(self)
            if parent.cancelled:
                self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        if self._event.is_set():
            return
        self._event.set()
        for child in list(self._children):
            child.cancel()

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def cancel_after(self, delay: float) -> asyncio.TimerHandle:
        """Compose a timeout: cancel this token after `delay` seconds."""
        return asyncio.get_running_loop().call_later(delay, self.cancel)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise Cancelled()

    async def wait(self) -> None:
        await self._event.wait()
