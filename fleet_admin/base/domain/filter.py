# (c) Nelen & Schuurmans

from datetime import datetime
from typing import Any

from pydantic import model_validator

from .types import Json
from .value_object import ValueObject

__all__ = ["Filter", "Range"]


class Range(ValueObject):
    start: datetime | None = None
    end: datetime | None = None

    @model_validator(mode="after")
    def verify_start_before_end(self):
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("Range start must not be after its end")
        return self

    def is_empty(self) -> bool:
        return self.start is None and self.end is None


def _is_set(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, Range):
        return not value.is_empty()
    return True


class Filter(ValueObject):
    """Base class for the filter values of one collection.

    Subclasses declare the filter fields. Fields that are None, an empty
    string or an empty Range are left out of the request.
    """

    def as_params(self) -> Json:
        return {
            name: value.model_dump(mode="json", exclude_none=True)
            if isinstance(value, Range)
            else value
            for name, value in dict(self).items()
            if _is_set(value)
        }
