import asyncio
from asyncio.exceptions import TimeoutError
from http import HTTPStatus
from unittest import mock

import pytest
from aiohttp import ClientError
from aiohttp import ClientSession
from aiohttp import ClientTimeout

from fleet_admin import CancellationToken
from fleet_admin import Cancelled
from fleet_admin import Conflict
from fleet_admin.api_client import ApiException
from fleet_admin.api_client import ApiProvider
from fleet_admin.api_client import ErrorKind
from fleet_admin.api_client import RequestDescriptor

MODULE = "fleet_admin.api_client.api_provider"


async def fake_token():
    return {"Authorization": "Bearer admin-token"}


async def no_token():
    return {}


@pytest.fixture
def response():
    # this mocks the aiohttp.ClientResponse:
    response = mock.Mock()
    response.status = int(HTTPStatus.OK)
    response.headers = {"Content-Type": "application/json"}
    response.json = mock.AsyncMock(return_value={"foo": 2})
    response.read = mock.AsyncMock()
    response.text = mock.AsyncMock(return_value="")
    return response


@pytest.fixture
async def api_provider_no_mock():
    provider = ApiProvider(url="http://testserver/foo/", headers_factory=fake_token)
    await provider.connect()
    yield provider
    await provider.disconnect()


@pytest.fixture
def request_m() -> mock.AsyncMock:
    request = mock.AsyncMock()
    with mock.patch.object(ClientSession, "request", new=request):
        yield request


@pytest.fixture
def api_provider(api_provider_no_mock, response, request_m) -> ApiProvider:
    request_m.return_value = response
    return api_provider_no_mock


async def test_get(api_provider: ApiProvider, request_m):
    actual = await api_provider.request("GET", "")

    assert request_m.call_count == 1
    assert request_m.call_args[1] == dict(
        method="GET",
        url="http://testserver/foo",
        headers={"Authorization": "Bearer admin-token"},
        timeout=ClientTimeout(total=5.0),
        json=None,
    )
    assert actual == {"foo": 2}


async def test_post_json(api_provider: ApiProvider, request_m):
    actual = await api_provider.request("POST", "bar", json={"limit": 25})

    assert request_m.call_args[1]["method"] == "POST"
    assert request_m.call_args[1]["url"] == "http://testserver/foo/bar"
    assert request_m.call_args[1]["json"] == {"limit": 25}
    assert actual == {"foo": 2}


async def test_list_body(api_provider: ApiProvider, response):
    response.json.return_value = [{"id": 1}, {"id": 2}]

    actual = await api_provider.request("GET", "bar")

    assert actual == [{"id": 1}, {"id": 2}]


@pytest.mark.parametrize(
    "path,params,expected_url",
    [
        ("", None, "http://testserver/foo"),
        ("bar", None, "http://testserver/foo/bar"),
        ("bar/", None, "http://testserver/foo/bar"),
        ("", {"a": 2}, "http://testserver/foo?a=2"),
        ("bar", {"a": 2}, "http://testserver/foo/bar?a=2"),
        ("", {"a": [1, 2]}, "http://testserver/foo?a=1&a=2"),
        ("", {"a": 1, "b": "foo"}, "http://testserver/foo?a=1&b=foo"),
    ],
)
async def test_url(api_provider: ApiProvider, path, params, expected_url, request_m):
    await api_provider.request("GET", path, params=params)
    assert request_m.call_args[1]["url"] == expected_url


async def test_timeout(api_provider: ApiProvider, request_m):
    await api_provider.request("POST", "bar", timeout=2.1)
    assert request_m.call_args[1]["timeout"] == ClientTimeout(total=2.1)


async def test_default_timeout(request_m, response):
    request_m.return_value = response
    provider = ApiProvider(url="http://testserver/foo", timeout=12.0)
    await provider.connect()
    try:
        await provider.request("GET", "bar")
    finally:
        await provider.disconnect()
    assert request_m.call_args[1]["timeout"] == ClientTimeout(total=12.0)
    assert request_m.call_args[1]["url"] == "http://testserver/foo/bar"


@pytest.mark.parametrize("status", [HTTPStatus.OK, HTTPStatus.CREATED])
async def test_unexpected_content_type(api_provider: ApiProvider, response, status):
    response.status = int(status)
    response.headers["Content-Type"] = "text/plain"
    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.status is status
    assert e.value.kind is ErrorKind.DECODE
    assert str(e.value) == f"{int(status)}: Unexpected content type 'text/plain'"


async def test_error_status_without_json(api_provider: ApiProvider, response):
    response.status = int(HTTPStatus.BAD_GATEWAY)
    response.headers["Content-Type"] = "text/html"
    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.status is HTTPStatus.BAD_GATEWAY
    assert e.value.kind is ErrorKind.HTTP
    assert e.value.message == "Unexpected content type 'text/html'"


async def test_error_status_with_text_body(api_provider: ApiProvider, response):
    response.status = int(HTTPStatus.INTERNAL_SERVER_ERROR)
    response.headers["Content-Type"] = "text/plain; charset=utf-8"
    response.text.return_value = "  db down\n"
    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    response.text.assert_awaited_once_with(errors="replace")
    assert e.value.kind is ErrorKind.HTTP
    assert str(e.value) == "500: db down"


async def test_error_status_with_long_html_body(api_provider: ApiProvider, response):
    response.status = int(HTTPStatus.BAD_GATEWAY)
    response.headers["Content-Type"] = "text/html"
    response.text.return_value = "<html>" + "x" * 1000 + "</html>"
    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.message.startswith("<html>xxx")
    assert len(e.value.message) == 200


@pytest.mark.parametrize("code", [499, 520, 599])
async def test_status_outside_enum(api_provider: ApiProvider, response, code):
    response.status = code
    response.json.return_value = {"error": "Origin is unreachable"}

    with pytest.raises(ApiException) as e:
        await api_provider.request("POST", "bar")

    assert e.value.status == code
    assert e.value.kind is ErrorKind.HTTP
    assert str(e.value) == f"{code}: Origin is unreachable"


async def test_invalid_json(api_provider: ApiProvider, response):
    response.json.side_effect = ValueError("Expecting value")
    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.kind is ErrorKind.DECODE
    assert e.value.status is HTTPStatus.OK


async def test_json_variant_content_type(api_provider: ApiProvider, response):
    response.headers["Content-Type"] = "application/something+json"
    actual = await api_provider.request("GET", "bar")
    assert actual == {"foo": 2}


async def test_no_content(api_provider: ApiProvider, response):
    response.status = int(HTTPStatus.NO_CONTENT)
    response.headers = {}

    actual = await api_provider.request("DELETE", "bar/2")
    assert actual is None


@pytest.mark.parametrize("status", [HTTPStatus.BAD_REQUEST, HTTPStatus.NOT_FOUND])
async def test_error_response(api_provider: ApiProvider, response, status):
    response.status = int(status)

    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.status is status
    assert e.value.kind is ErrorKind.HTTP
    assert str(e.value) == str(int(status)) + ": {'foo': 2}"


@pytest.mark.parametrize("key", ["error", "message", "detail"])
async def test_error_response_message(api_provider: ApiProvider, response, key):
    response.status = int(HTTPStatus.FORBIDDEN)
    response.json.return_value = {key: "Permission denied"}

    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.message == "Permission denied"
    assert str(e.value) == "403: Permission denied"


@pytest.mark.parametrize("error_cls", [ClientError, TimeoutError])
async def test_transport_error(api_provider: ApiProvider, request_m, error_cls):
    request_m.side_effect = error_cls()

    with pytest.raises(ApiException) as e:
        await api_provider.request("GET", "bar")

    assert e.value.kind is ErrorKind.TRANSPORT
    assert e.value.status is None
    assert str(e.value).startswith("transport: ")


async def test_no_retry(api_provider: ApiProvider, request_m, response):
    response.status = int(HTTPStatus.SERVICE_UNAVAILABLE)
    request_m.side_effect = (ClientError("foo"), response)

    with pytest.raises(ApiException):
        await api_provider.request("GET", "bar")

    assert request_m.call_count == 1


async def test_no_token(api_provider: ApiProvider, request_m):
    api_provider._headers_factory = no_token
    await api_provider.request("GET", "")
    assert request_m.call_args[1]["headers"] == {}


@pytest.mark.parametrize(
    "path,trailing_slash,expected",
    [
        ("bar", False, "bar"),
        ("bar", True, "bar/"),
        ("bar/", False, "bar"),
        ("bar/", True, "bar/"),
    ],
)
async def test_trailing_slash(
    api_provider: ApiProvider, path, trailing_slash, expected, request_m
):
    api_provider._trailing_slash = trailing_slash
    await api_provider.request("GET", path)

    assert request_m.call_args[1]["url"] == "http://testserver/foo/" + expected


async def test_conflict_with_message(api_provider: ApiProvider, response):
    response.status = HTTPStatus.CONFLICT
    response.json.return_value = {"error": "Duplicate ban"}

    with pytest.raises(Conflict, match="Duplicate ban"):
        await api_provider.request("POST", "bar")


async def test_custom_header_precedes(api_provider: ApiProvider, request_m):
    await api_provider.request("POST", "bar", headers={"Authorization": "bar"})
    assert request_m.call_args[1]["headers"]["Authorization"] == "bar"


async def test_disconnect(api_provider: ApiProvider):
    session = api_provider._session
    with mock.patch.object(session, "close", new_callable=mock.AsyncMock) as close_m:
        await api_provider.disconnect()

    close_m.assert_awaited_once()
    assert api_provider._session is None


async def test_not_connected():
    provider = ApiProvider(url="http://testserver/foo/")
    with pytest.raises(AssertionError):
        await provider.request("GET", "bar")


async def test_send(api_provider: ApiProvider, request_m):
    actual = await api_provider.send(
        RequestDescriptor(path="bar", method="PUT", body={"a": 1}, params={"b": 2})
    )

    assert request_m.call_args[1]["method"] == "PUT"
    assert request_m.call_args[1]["url"] == "http://testserver/foo/bar?b=2"
    assert request_m.call_args[1]["json"] == {"a": 1}
    assert actual == {"foo": 2}


async def test_cancelled_before(api_provider: ApiProvider, request_m):
    token = CancellationToken()
    token.cancel()

    with pytest.raises(Cancelled):
        await api_provider.request("GET", "bar", token=token)

    assert not request_m.called


async def test_cancelled_during(api_provider: ApiProvider, request_m, response):
    started = asyncio.Event()
    release = asyncio.Event()

    async def slow_request(**kwargs):
        started.set()
        await release.wait()
        return response

    request_m.side_effect = slow_request
    token = CancellationToken()
    call = asyncio.create_task(api_provider.request("GET", "bar", token=token))
    await started.wait()
    token.cancel()

    with pytest.raises(Cancelled):
        await call


async def test_cancelled_error_is_not_reported(api_provider: ApiProvider, response):
    # a cancelled call never surfaces as an error, even if the server failed
    response.status = int(HTTPStatus.INTERNAL_SERVER_ERROR)
    token = CancellationToken()

    async def cancel_then_fail():
        token.cancel()
        return {"error": "boom"}

    response.json.side_effect = cancel_then_fail

    with pytest.raises(Cancelled):
        await api_provider.request("GET", "bar", token=token)


async def test_token_not_cancelled(api_provider: ApiProvider):
    actual = await api_provider.request("GET", "bar", token=CancellationToken())
    assert actual == {"foo": 2}
