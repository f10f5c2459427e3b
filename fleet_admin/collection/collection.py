from typing import Generic
from typing import Literal
from typing import TypeVar

from fleet_admin.api_client import ApiProvider
from fleet_admin.api_client import CollectionGateway
from fleet_admin.base.domain import Filter

from .flash import Notify
from .normalization import DateFields
from .query_controller import Listener
from .query_controller import QueryController

__all__ = ["Collection"]

F = TypeVar("F", bound=Filter)


class Collection(Generic[F]):
    """Everything that differs between two list views of the console.

    `path`, `item_path` and `create_path` may contain placeholders (other
    than "{id}") that are filled in from the keyword arguments of `gateway()` and
    `controller()`, e.g. "api/contests/{contest_id}/entries".
    """

    def __init__(
        self,
        path: str,
        identity_key: str,
        filter_model: type[F],
        date_fields: DateFields | None = None,
        sort_field: str = "created_on",
        sort_desc: bool = True,
        item_path: str | None = None,
        method: Literal["GET", "POST"] = "POST",
        create_path: str | None = None,
    ):
        self.path = path
        self.identity_key = identity_key
        self.filter_model = filter_model
        self.date_fields = date_fields or DateFields()
        self.sort_field = sort_field
        self.sort_desc = sort_desc
        self.item_path = item_path
        self.create_path = create_path
        self.method = method

    def __repr__(self) -> str:
        return f"Collection({self.path!r})"

    def gateway(
        self, provider_override: ApiProvider | None = None, **path_args
    ) -> CollectionGateway:
        item_path = self.item_path
        if item_path is not None:
            item_path = item_path.format(id="{id}", **path_args)
        create_path = self.create_path
        if create_path is not None:
            create_path = create_path.format(**path_args)
        return CollectionGateway(
            self.path.format(**path_args),
            item_path=item_path,
            method=self.method,
            provider_override=provider_override,
            create_path=create_path,
        )

    def controller(
        self,
        filter: F | None = None,
        page_size: int = 25,
        notify: Notify | None = None,
        listener: Listener | None = None,
        provider_override: ApiProvider | None = None,
        **path_args,
    ) -> QueryController[F]:
        return QueryController(
            self.gateway(provider_override, **path_args),
            sort_field=self.sort_field,
            sort_desc=self.sort_desc,
            page_size=page_size,
            filter=self.filter_model() if filter is None else filter,
            identity_key=self.identity_key,
            date_fields=self.date_fields,
            notify=notify,
            listener=listener,
        )
