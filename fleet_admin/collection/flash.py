from collections.abc import Callable
from enum import Enum
from typing import Any

import blinker

from fleet_admin.base.domain import ValueObject

__all__ = ["BlinkerNotifier", "Flash", "FlashLevel", "Notify"]


class FlashLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Flash(ValueObject):
    """A short user-facing message."""

    level: FlashLevel
    message: str
    heading: str = ""
    closable: bool = True


Notify = Callable[[Flash], Any]


class BlinkerNotifier:
    """Publishes flashes on a blinker signal so that a UI can subscribe."""

    def __init__(self, name: str = "flash"):
        self._signal = blinker.signal(name)

    def connect(self, receiver: Callable[[Flash], Any]) -> None:
        # strong reference: receivers are often lambdas or closures
        self._signal.connect(receiver, weak=False)

    def disconnect(self, receiver: Callable[[Flash], Any]) -> None:
        self._signal.disconnect(receiver)

    def __call__(self, flash: Flash) -> None:
        self._signal.send(flash)
