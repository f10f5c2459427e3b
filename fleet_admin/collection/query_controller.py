# (c) Nelen & Schuurmans

import asyncio
import logging
from collections.abc import Callable
from typing import Any
from typing import Generic
from typing import TypeVar

from fleet_admin.api_client import ApiError
from fleet_admin.api_client import CollectionGateway
from fleet_admin.base.domain import CancellationToken
from fleet_admin.base.domain import Cancelled
from fleet_admin.base.domain import Filter
from fleet_admin.base.domain import Json
from fleet_admin.base.domain import QueryParameters

from .flash import Flash
from .flash import FlashLevel
from .flash import Notify
from .normalization import DateFields
from .optimistic import OptimisticRowSet
from .state import CollectionViewState

__all__ = ["QueryController"]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Filter)

Listener = Callable[[CollectionViewState], Any]


class QueryController(Generic[F]):
    """Keeps the rows of one collection view in line with its page, sort and filter.

    Every change of page, page size, sort or filter fetches immediately. Each
    fetch is tagged with an increasing request id; a response is only
    published if its id is still the latest one, so responses arriving out of
    order never overwrite newer data. Starting a fetch also signals the token
    of the previous one.

    A failed fetch sets `error` and keeps the rows that were shown. A
    cancelled fetch changes nothing.

    Mutators return the asyncio.Task of the fetch they started (or None).
    """

    def __init__(
        self,
        gateway: CollectionGateway,
        sort_field: str,
        sort_desc: bool = True,
        page_size: int = 25,
        filter: F | None = None,
        identity_key: str = "id",
        date_fields: DateFields | None = None,
        notify: Notify | None = None,
        listener: Listener | None = None,
    ):
        self.gateway = gateway
        self.date_fields = date_fields or DateFields()
        self._notify = notify
        self._listener = listener
        self._state = CollectionViewState(
            page=0,
            page_size=page_size,
            sort_field=sort_field,
            sort_desc=sort_desc,
            filter=filter,
        )
        self._optimistic = OptimisticRowSet(identity_key)
        self._fetched: list[Json] = []
        self._server_total = 0
        self._token: CancellationToken | None = None
        self._fetch_token: CancellationToken | None = None
        self._task: asyncio.Task | None = None
        self._terminated = False

    @property
    def state(self) -> CollectionViewState:
        return self._state

    @property
    def rows(self) -> list[Json]:
        return list(self._state.rows)

    @property
    def total_count(self) -> int:
        return self._state.total_count

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> ApiError | None:
        return self._state.error

    @property
    def mounted(self) -> bool:
        return self._token is not None and not self._terminated

    # lifecycle

    def mount(self) -> asyncio.Task:
        if self._terminated:
            raise RuntimeError("A controller can't be mounted after unmount")
        if self._token is not None:
            raise RuntimeError("Controller is already mounted")
        self._token = CancellationToken()
        return self._start_fetch()

    def unmount(self) -> None:
        if self._token is None or self._terminated:
            return
        self._terminated = True
        self._token.cancel()

    async def __aenter__(self) -> "QueryController[F]":
        await self.mount()
        return self

    async def __aexit__(self, *args) -> None:
        self.unmount()

    # user intents

    def set_page(self, page: int) -> asyncio.Task | None:
        return self._change(page=page)

    def set_page_size(self, page_size: int) -> asyncio.Task | None:
        return self._change(page=0, page_size=page_size)

    def set_sort(self, field: str, desc: bool) -> asyncio.Task | None:
        if field != self._state.sort_field:
            return self._change(page=0, sort_field=field, sort_desc=desc)
        return self._change(sort_desc=desc)

    def set_filter(self, filter: F | None) -> asyncio.Task | None:
        """Rows prepended earlier are dropped: they may not match the new filter."""
        if filter != self._state.filter:
            self._check_mounted()
            self._optimistic.clear()
        return self._change(page=0, filter=filter)

    def refresh(self) -> asyncio.Task:
        """Fetch again with unchanged state, e.g. after a record was removed."""
        self._check_mounted()
        return self._start_fetch()

    def prepend(self, *rows: Json) -> None:
        """Show rows created on the client ahead of the fetched ones."""
        self._check_mounted()
        for row in reversed(rows):
            self._optimistic.add(self.date_fields.normalize(row))
        self._publish()

    # internals

    def _check_mounted(self) -> None:
        if self._terminated:
            raise RuntimeError("Controller is unmounted")
        if self._token is None:
            raise RuntimeError("Controller is not mounted")

    def _change(self, **values) -> asyncio.Task | None:
        self._check_mounted()
        new_state = self._state.update(**values)
        if new_state.query_parameters() == self._state.query_parameters() and (
            new_state.filter == self._state.filter
        ):
            return self._task
        return self._start_fetch(**values)

    def _start_fetch(self, **values) -> asyncio.Task:
        assert self._token is not None
        if self._fetch_token is not None:
            self._fetch_token.cancel()
        self._fetch_token = token = self._token.child()
        request_id = self._state.last_request_id + 1
        self._publish(last_request_id=request_id, loading=True, **values)
        self._task = asyncio.get_running_loop().create_task(
            self._fetch(
                request_id,
                self._state.query_parameters(),
                self._state.filter,
                token,
            )
        )
        return self._task

    async def _fetch(
        self,
        request_id: int,
        params: QueryParameters,
        filter: Filter | None,
        token: CancellationToken,
    ) -> None:
        try:
            result = await self.gateway.fetch_result(params, filter, token=token)
        except Cancelled:
            logger.debug(f"{self.gateway.path}: request {request_id} cancelled")
            return
        if self._terminated:
            return
        if request_id != self._state.last_request_id:
            logger.debug(f"{self.gateway.path}: request {request_id} superseded")
            return
        if not result.ok:
            assert result.error is not None
            logger.warning(f"{self.gateway.path}: fetch failed: {result.error}")
            self._publish(loading=False, error=result.error)
            if self._notify is not None:
                self._notify(Flash(level=FlashLevel.ERROR, message=str(result.error)))
            return
        if self._state.page > 0 and params.offset >= result.total_count:
            # the page vanished (e.g. records were removed); go back to the start
            self._start_fetch(page=0)
            return
        rows = self.date_fields.normalize_rows(result.rows)
        self._optimistic.reconcile(rows)
        self._fetched = rows
        self._server_total = result.total_count
        self._publish(loading=False, error=None)

    def _publish(self, **values) -> None:
        if self._terminated:
            return
        page_size = values.get("page_size", self._state.page_size)
        rows = self._optimistic.merge(self._fetched)[:page_size]
        total_count = max(self._server_total + len(self._optimistic), len(rows))
        self._state = self._state.update(
            rows=rows, total_count=total_count, **values
        )
        if self._listener is not None:
            self._listener(self._state)
