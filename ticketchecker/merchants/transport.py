"""
HTTP transport for the merchant directory API.

``HttpClient`` is the capability the merchant client depends on; every
request resolves to a ``Result`` holding either the response body or an
``ErrorResponse``.  ``HttpxTransport`` is the bundled async implementation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from ticketchecker.errors import ErrorCode, ErrorResponse, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """Describes one API call."""

    path: str
    method: str = "GET"
    token: Optional[str] = field(default=None, repr=False)
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def merchants(cls, token: str, path: str = "/merchants") -> "Endpoint":
        return cls(path=path, method="GET", token=token)

    def headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


@runtime_checkable
class HttpClient(Protocol):
    async def request(self, endpoint: Endpoint) -> Result[bytes]:
        ...


def _error_from_response(resp: httpx.Response) -> ErrorResponse:
    """Use the server's own error body when it has the ErrorResponse shape."""
    try:
        parsed = ErrorResponse.model_validate_json(resp.content)
    except ValidationError:
        parsed = None

    if parsed is not None:
        if parsed.status_code is None:
            parsed = parsed.model_copy(update={"status_code": resp.status_code})
        return parsed

    return ErrorResponse(
        error=f"Request failed with status {resp.status_code}",
        status_code=resp.status_code,
        details=resp.text[:500] or None,
    )


class HttpxTransport:
    """Async ``HttpClient`` backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def request(self, endpoint: Endpoint) -> Result[bytes]:
        url = f"{self.base_url}{endpoint.path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(
                    endpoint.method,
                    url,
                    params=endpoint.params or None,
                    headers=endpoint.headers(),
                )
        except httpx.TimeoutException as e:
            logger.error(f"{endpoint.method} {endpoint.path} timed out: {e}")
            return Result.fail(
                "The request timed out.",
                error_code=ErrorCode.NETWORK_ERROR,
                details=str(e) or type(e).__name__,
            )
        except httpx.HTTPError as e:
            logger.error(f"{endpoint.method} {endpoint.path} failed: {e}")
            return Result.fail(
                "Network request failed.",
                error_code=ErrorCode.NETWORK_ERROR,
                details=str(e) or type(e).__name__,
            )

        if resp.is_success:
            return Result.success(resp.content)

        logger.warning(
            "%s %s returned %d: %s",
            endpoint.method,
            endpoint.path,
            resp.status_code,
            resp.text[:200],
        )
        return Result.failure(_error_from_response(resp))
