"""Tests for the httpx-backed transport."""

import asyncio

import httpx

from ticketchecker.errors import ErrorCode
from ticketchecker.merchants.transport import Endpoint, HttpxTransport


def _transport(handler):
    return HttpxTransport("https://api.test/", transport=httpx.MockTransport(handler))


def _request(transport, endpoint=None):
    return asyncio.run(transport.request(endpoint or Endpoint.merchants("tok")))


def test_success_returns_body_and_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, content=b"[]")

    result = _request(_transport(handler))

    assert result.ok
    assert result.value == b"[]"
    assert seen == {"url": "https://api.test/merchants", "auth": "Bearer tok"}


def test_server_error_body_is_used():
    def handler(request):
        return httpx.Response(
            401, json={"error": "Session expired", "errorCode": "TOKEN_EXPIRED"}
        )

    result = _request(_transport(handler))

    assert result.error.error == "Session expired"
    assert result.error.error_code == "TOKEN_EXPIRED"
    assert result.error.status_code == 401


def test_non_json_error_body():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    result = _request(_transport(handler))

    assert result.error.status_code == 502
    assert "502" in result.error.error
    assert result.error.details == "Bad Gateway"
    assert result.error.error_code is None


def test_connection_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = _request(_transport(handler))

    assert result.error.error_code == ErrorCode.NETWORK_ERROR.value
    assert "connection refused" in result.error.details


def test_timeout():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    result = _request(_transport(handler))

    assert result.error.error_code == ErrorCode.NETWORK_ERROR.value
    assert result.error.error == "The request timed out."


def test_endpoint_without_token_has_no_auth_header():
    assert "Authorization" not in Endpoint(path="/x").headers()


def test_endpoint_repr_hides_token():
    assert "tok" not in repr(Endpoint.merchants("tok"))
