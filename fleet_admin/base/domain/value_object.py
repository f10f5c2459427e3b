# (c) Nelen & Schuurmans

from typing import Type
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError

from .exceptions import BadRequest

__all__ = ["ValueObject"]


T = TypeVar("T", bound="ValueObject")


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(cls: Type[T], **values) -> T:
        try:
            return cls(**values)
        except ValidationError as e:
            raise BadRequest(e)

    def update(self: T, **values) -> T:
        # dict(self) keeps nested models as they are (subclasses included)
        try:
            return self.__class__(**{**dict(self), **values})
        except ValidationError as e:
            raise BadRequest(e)
