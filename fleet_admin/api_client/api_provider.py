import asyncio
import logging
import re
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Coroutine
from http import HTTPStatus
from typing import Any
from typing import TypeVar
from urllib.parse import quote
from urllib.parse import urlencode
from urllib.parse import urljoin

import aiohttp
from aiohttp import ClientSession
from aiohttp import ClientTimeout
from pydantic import AnyHttpUrl

from fleet_admin.base.domain import CancellationToken
from fleet_admin.base.domain import Cancelled
from fleet_admin.base.domain import Conflict
from fleet_admin.base.domain import Json
from fleet_admin.base.domain import Provider

from .exceptions import ApiException
from .exceptions import ErrorKind
from .request import RequestDescriptor

__all__ = ["ApiProvider"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# keys in an error body that may hold a human readable message
MESSAGE_KEYS = ("error", "message", "detail")
# error bodies that are not JSON are cut off at this length
MAX_TEXT_MESSAGE = 200


def is_success(status: HTTPStatus | int) -> bool:
    """Returns True on 2xx status"""
    return (int(status) // 100) == 2


def to_status(code: int) -> HTTPStatus | int:
    """Statuses outside the HTTPStatus enum (e.g. 520) are kept as int"""
    try:
        return HTTPStatus(code)
    except ValueError:
        return code


def error_message(body: Any) -> str:
    if isinstance(body, dict):
        for key in MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return str(body)


def check_exception(status: HTTPStatus | int, body: Any) -> None:
    if status == HTTPStatus.CONFLICT:
        raise Conflict(error_message(body))
    elif not is_success(status):
        raise ApiException(error_message(body), status=status)


JSON_CONTENT_TYPE_REGEX = re.compile(r"^application\/[^+]*[+]?(json);?.*$")


def is_json_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    return bool(JSON_CONTENT_TYPE_REGEX.match(content_type))


def join(url: str, path: str, trailing_slash: bool = False) -> str:
    """Results in a full url without trailing slash"""
    assert url.endswith("/")
    assert not path.startswith("/")
    result = urljoin(url, path)
    if trailing_slash and not result.endswith("/"):
        result = result + "/"
    elif not trailing_slash and result.endswith("/"):
        result = result[:-1]
    return result


def add_query_params(url: str, params: Json | None) -> str:
    if params is None:
        return url
    return url + "?" + urlencode(params, doseq=True)


async def race(
    coro: Coroutine[Any, Any, T], token: CancellationToken | None
) -> T:
    """Await `coro` unless `token` is signaled first.

    A signaled token always wins: the call settles as Cancelled even when the
    response is already there.
    """
    if token is None:
        return await coro
    if token.cancelled:
        coro.close()
        raise Cancelled()
    task = asyncio.ensure_future(coro)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if token.cancelled or not task.done():
            task.cancel()
    if token.cancelled:
        if task.done() and not task.cancelled():
            task.exception()  # mark as retrieved; the outcome is discarded
        raise Cancelled()
    return task.result()


class ApiProvider(Provider):
    """Basic JSON API provider with cancellation and bearer tokens.

    Requests are never retried; a retry policy is up to the caller.

    Args:
        url: The url of the API (with trailing slash)
        headers_factory: Coroutine that returns headers (for e.g. authorization)
        timeout: Default total timeout per request in seconds
        trailing_slash: Wether to automatically add or remove trailing slashes.
    """

    def __init__(
        self,
        url: AnyHttpUrl | str,
        headers_factory: Callable[[], Awaitable[dict[str, str]]] | None = None,
        timeout: float = 5.0,
        trailing_slash: bool = False,
    ):
        self._url = str(url)
        if not self._url.endswith("/"):
            self._url += "/"
        self._headers_factory = headers_factory
        self._timeout = timeout
        self._trailing_slash = trailing_slash
        self._session: ClientSession | None = None

    async def connect(self) -> None:
        # The ClientSession must be created while the event loop runs.
        if self._session is None:
            self._session = ClientSession()

    async def disconnect(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _perform(
        self,
        method: str,
        path: str,
        params: Json | None,
        json: Any,
        headers: dict[str, str] | None,
        timeout: float | None,
    ) -> Any:
        assert self._session is not None, "ApiProvider not connected"
        actual_headers = {}
        if self._headers_factory is not None:
            actual_headers.update(await self._headers_factory())
        if headers:
            actual_headers.update(headers)
        url = add_query_params(
            join(self._url, quote(path), self._trailing_slash), params
        )
        try:
            response = await self._session.request(
                method=method,
                url=url,
                headers=actual_headers,
                timeout=ClientTimeout(total=timeout or self._timeout),
                json=json,
            )
            await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.info(f"{method} {url} failed: {e!r}")
            raise ApiException(
                str(e) or e.__class__.__name__, kind=ErrorKind.TRANSPORT
            ) from e

        status = to_status(response.status)
        if status == HTTPStatus.NO_CONTENT:
            return None
        content_type = response.headers.get("Content-Type")
        if not is_json_content_type(content_type):
            if is_success(status):
                raise ApiException(
                    f"Unexpected content type '{content_type}'",
                    status=status,
                    kind=ErrorKind.DECODE,
                )
            text = await response.text(errors="replace")
            raise ApiException(
                text.strip()[:MAX_TEXT_MESSAGE]
                or f"Unexpected content type '{content_type}'",
                status=status,
            )
        try:
            body = await response.json()
        except ValueError as e:
            raise ApiException(
                f"Invalid JSON body: {e}", status=status, kind=ErrorKind.DECODE
            ) from e
        check_exception(status, body)
        return body

    async def request(
        self,
        method: str,
        path: str,
        params: Json | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """Perform one request and return the decoded JSON body (None on 204).

        Raises:
            ApiException: on transport failures, error statuses and bodies
                that can't be decoded; see ApiException.kind
            Conflict: on a 409 response
            Cancelled: when `token` is signaled before the call settles
        """
        return await race(
            self._perform(method, path, params, json, headers, timeout), token
        )

    async def send(self, request: RequestDescriptor) -> Any:
        return await self.request(
            request.method,
            request.path,
            params=request.params,
            json=request.body,
            token=request.token,
        )
