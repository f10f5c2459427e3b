from http import HTTPStatus
from typing import Any
from typing import Literal

import inject
from pydantic import ValidationError

from fleet_admin.base.domain import CancellationToken
from fleet_admin.base.domain import Conflict
from fleet_admin.base.domain import DoesNotExist
from fleet_admin.base.domain import Filter
from fleet_admin.base.domain import Id
from fleet_admin.base.domain import Json
from fleet_admin.base.domain import Page
from fleet_admin.base.domain import QueryParameters

from .api_provider import ApiProvider
from .exceptions import ApiException
from .exceptions import ErrorKind
from .request import RequestDescriptor
from .result import Result

__all__ = ["CollectionGateway", "to_page"]


def to_page(body: Any, params: QueryParameters | None = None) -> Page[Json]:
    """Accept both `{"data": [...], "count": n}` and a bare list of rows."""
    if isinstance(body, dict) and "data" in body:
        items = body["data"] or []  # an empty result may come as null
        total = body.get("count", len(items))
    elif isinstance(body, list):
        items = body
        total = len(body)
    else:
        raise ApiException(
            f"Unexpected response shape: {type(body).__name__}",
            kind=ErrorKind.DECODE,
        )
    try:
        return Page[Json](
            total=total,
            items=items,
            limit=None if params is None else params.limit,
            offset=None if params is None else params.offset,
        )
    except ValidationError as e:
        raise ApiException(
            f"Unexpected response shape: {e}", kind=ErrorKind.DECODE
        ) from e


class CollectionGateway:
    """Typed access to one remote collection.

    `path` is the list endpoint; `item_path` (containing "{id}") is used for
    single records and `create_path` for adding one.
    """

    def __init__(
        self,
        path: str,
        item_path: str | None = None,
        method: Literal["GET", "POST"] = "POST",
        provider_override: ApiProvider | None = None,
        create_path: str | None = None,
    ):
        assert not path.startswith("/")
        assert item_path is None or "{id}" in item_path
        self.path = path
        self.item_path = item_path
        self.create_path = create_path
        self.method = method
        self.provider_override = provider_override

    @property
    def provider(self) -> ApiProvider:
        return self.provider_override or inject.instance(ApiProvider)

    def _item_path(self, id: Id) -> str:
        if self.item_path is None:
            raise NotImplementedError(f"{self.path} has no single record endpoint")
        return self.item_path.format(id=id)

    def list_request(
        self,
        params: QueryParameters,
        filter: Filter | None = None,
        token: CancellationToken | None = None,
    ) -> RequestDescriptor:
        body = params.as_body(filter)
        if self.method == "GET":
            return RequestDescriptor(
                path=self.path, method="GET", params=body, token=token
            )
        return RequestDescriptor(path=self.path, method="POST", body=body, token=token)

    async def fetch(
        self,
        params: QueryParameters,
        filter: Filter | None = None,
        token: CancellationToken | None = None,
    ) -> Page[Json]:
        try:
            body = await self.provider.send(self.list_request(params, filter, token))
        except Conflict as e:
            # Conflict is for mutations; a list query reports it as a status
            raise ApiException(str(e), status=HTTPStatus.CONFLICT) from e
        return to_page(body, params)

    async def fetch_result(
        self,
        params: QueryParameters,
        filter: Filter | None = None,
        token: CancellationToken | None = None,
    ) -> Result[Json]:
        """Like fetch, but failures are returned as a Result.

        Cancelled is still raised: it is not a failure.
        """
        try:
            page = await self.fetch(params, filter, token)
        except ApiException as e:
            return Result.failure(e)
        return Result.success(page)

    async def get(self, id: Id, token: CancellationToken | None = None) -> Json | None:
        try:
            result = await self.provider.request(
                "GET", self._item_path(id), token=token
            )
        except ApiException as e:
            if e.status is HTTPStatus.NOT_FOUND:
                return None
            raise e
        assert result is not None
        return result

    async def add(self, item: Json) -> Json:
        if self.create_path is None:
            raise NotImplementedError(f"{self.path} has no create endpoint")
        result = await self.provider.request("POST", self.create_path, json=item)
        assert result is not None
        return result

    async def update(self, id: Id, item: Json) -> Json:
        try:
            result = await self.provider.request("PUT", self._item_path(id), json=item)
        except ApiException as e:
            if e.status is HTTPStatus.NOT_FOUND:
                raise DoesNotExist("resource", id)
            raise e
        assert result is not None
        return result

    async def remove(self, id: Id) -> bool:
        try:
            await self.provider.request("DELETE", self._item_path(id))
        except ApiException as e:
            if e.status is HTTPStatus.NOT_FOUND:
                return False
            raise e
        else:
            return True
