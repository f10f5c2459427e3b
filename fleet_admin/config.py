# (c) Nelen & Schuurmans

import logging
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any
from typing import Literal
from typing import TypeVar

import inject
from pydantic import AnyHttpUrl
from pydantic import Field

from fleet_admin.api_client import ApiProvider
from fleet_admin.base.domain import Filter
from fleet_admin.base.domain import ValueObject
from fleet_admin.collection import Collection
from fleet_admin.collection import FilterDebouncer
from fleet_admin.collection import QueryController

__all__ = ["ConsoleConfig"]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Filter)


class ConsoleConfig(ValueObject):
    api_url: AnyHttpUrl
    timeout: float = Field(5.0, gt=0)
    trailing_slash: bool = False
    page_size: Literal[10, 25, 50, 100] = 25
    debounce_delay: float = Field(1.0, ge=0)
    filter_min_length: int = Field(2, ge=0)

    def provider(
        self, headers_factory: Callable[[], Awaitable[dict[str, str]]] | None = None
    ) -> ApiProvider:
        return ApiProvider(
            url=self.api_url,
            headers_factory=headers_factory,
            timeout=self.timeout,
            trailing_slash=self.trailing_slash,
        )

    def apply(
        self, headers_factory: Callable[[], Awaitable[dict[str, str]]] | None = None
    ) -> ApiProvider:
        """Bind an ApiProvider for this configuration for injection.

        The returned provider still needs to be connected.
        """
        provider = self.provider(headers_factory)
        inject.clear_and_configure(lambda binder: binder.bind(ApiProvider, provider))
        logger.info(f"Configured API provider for {self.api_url}")
        return provider

    def controller(self, collection: Collection[F], **kwargs) -> QueryController[F]:
        kwargs.setdefault("page_size", self.page_size)
        return collection.controller(**kwargs)

    def debouncer(self, commit: Callable[[str], Any]) -> FilterDebouncer:
        return FilterDebouncer(
            commit, delay=self.debounce_delay, min_length=self.filter_min_length
        )
