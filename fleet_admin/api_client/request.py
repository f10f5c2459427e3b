from typing import Any
from typing import Literal

from pydantic import ConfigDict

from fleet_admin.base.domain import CancellationToken
from fleet_admin.base.domain import Json
from fleet_admin.base.domain import ValueObject

__all__ = ["RequestDescriptor"]


class RequestDescriptor(ValueObject):
    """One HTTP request, not yet sent."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str
    method: Literal["GET", "POST", "PUT", "DELETE"] = "GET"
    body: Any = None
    params: Json | None = None
    token: CancellationToken | None = None
