from collections.abc import Sequence
from typing import Generic
from typing import TypeVar

from fleet_admin.base.domain import Page
from fleet_admin.base.domain import ValueObject

from .exceptions import ApiException
from .exceptions import ErrorKind

__all__ = ["ApiError", "Result"]

T = TypeVar("T")


class ApiError(ValueObject):
    kind: ErrorKind
    status: int | None = None
    message: str

    @classmethod
    def from_exception(cls, exc: ApiException) -> "ApiError":
        return cls(
            kind=exc.kind,
            status=None if exc.status is None else int(exc.status),
            message=exc.message,
        )

    def __str__(self) -> str:
        if self.status is None:
            return f"{self.kind.value} error: {self.message}"
        return f"HTTP {self.status}: {self.message}"


class Result(ValueObject, Generic[T]):
    """The outcome of one list request: either rows with a count, or an error."""

    ok: bool
    rows: Sequence[T] = ()
    total_count: int = 0
    error: ApiError | None = None

    @classmethod
    def success(cls, page: Page[T]) -> "Result[T]":
        return cls(ok=True, rows=list(page.items), total_count=page.total)

    @classmethod
    def failure(cls, exc: ApiException) -> "Result[T]":
        return cls(ok=False, error=ApiError.from_exception(exc))
