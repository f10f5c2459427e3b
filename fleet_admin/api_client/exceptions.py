from enum import Enum
from http import HTTPStatus
from typing import Any

from fleet_admin.base.domain import Cancelled

__all__ = ["ApiException", "Cancelled", "ErrorKind"]


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    HTTP = "http"
    DECODE = "decode"


class ApiException(ValueError):
    def __init__(
        self,
        obj: Any,
        status: HTTPStatus | int | None = None,
        kind: ErrorKind = ErrorKind.HTTP,
    ):
        self.status = status
        self.kind = kind
        super().__init__(obj)

    @property
    def message(self) -> str:
        return super().__str__()

    def __str__(self):
        if self.status is None:
            return f"{self.kind.value}: {self.message}"
        return f"{int(self.status)}: {self.message}"
