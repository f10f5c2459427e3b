# (c) Nelen & Schuurmans

from collections.abc import Sequence
from typing import Generic
from typing import TypeVar

from pydantic import BaseModel
from pydantic import Field

from .filter import Filter
from .types import Json
from .value_object import ValueObject

__all__ = ["Page", "QueryParameters"]

T = TypeVar("T")


class QueryParameters(ValueObject):
    """The paging and sorting part of a list request.

    Offsets are always in row units (page * page_size).
    """

    limit: int = Field(gt=0)
    offset: int = Field(0, ge=0)
    order_by: str
    desc: bool = False

    @classmethod
    def for_page(
        cls, page: int, page_size: int, order_by: str, desc: bool
    ) -> "QueryParameters":
        return cls(
            limit=page_size, offset=page * page_size, order_by=order_by, desc=desc
        )

    def as_body(self, filter: Filter | None = None) -> Json:
        body = filter.as_params() if filter is not None else {}
        body.update(self.model_dump())
        return body


class Page(BaseModel, Generic[T]):
    total: int = Field(ge=0)
    items: Sequence[T]
    limit: int | None = None
    offset: int | None = None
