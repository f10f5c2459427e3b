# (c) Nelen & Schuurmans

from collections.abc import Sequence

from pydantic import Field

from fleet_admin.api_client import ApiError
from fleet_admin.base.domain import Filter
from fleet_admin.base.domain import Json
from fleet_admin.base.domain import QueryParameters
from fleet_admin.base.domain import ValueObject

__all__ = ["CollectionViewState"]


class CollectionViewState(ValueObject):
    """A snapshot of one mounted collection view.

    `rows` and `total_count` are what the presentation layer shows; they
    belong to the request with id `last_request_id`.
    """

    page: int = Field(0, ge=0)
    page_size: int = Field(25, gt=0)
    sort_field: str
    sort_desc: bool = True
    filter: Filter | None = None
    loading: bool = False
    rows: Sequence[Json] = ()
    total_count: int = Field(0, ge=0)
    error: ApiError | None = None
    last_request_id: int = 0

    def query_parameters(self) -> QueryParameters:
        return QueryParameters.for_page(
            self.page, self.page_size, self.sort_field, self.sort_desc
        )
