"""
Merchant directory client.

Fetches the merchant list for the current session and decodes it into
:class:`Merchant` records.  Every outcome is a ``Result``; transport
failures are passed through untouched and decode failures are classified
with the raw decoder message kept in ``details``.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from pydantic import ValidationError

from ticketchecker.errors import ErrorCode, Result
from ticketchecker.merchants.decoding import (
    classify_decode_error,
    decode_failure_from_validation_error,
    decode_merchants,
)
from ticketchecker.merchants.models import Merchant
from ticketchecker.merchants.tokens import AccessTokenProvider, EnvAccessTokenProvider
from ticketchecker.merchants.transport import Endpoint, HttpClient, HttpxTransport

if TYPE_CHECKING:
    from ticketchecker.config.schema_models import MerchantApiSettings

logger = logging.getLogger(__name__)


class MerchantDirectoryClient:
    """Single-request, single-decode merchant fetcher."""

    def __init__(
        self,
        token_provider: AccessTokenProvider,
        http_client: HttpClient,
        merchants_path: str = "/merchants",
    ):
        self._token_provider = token_provider
        self._http_client = http_client
        self.merchants_path = merchants_path

    async def fetch_merchants(self) -> Result[List[Merchant]]:
        """Fetch and decode the merchant list.

        Returns:
            ``Result`` with the decoded merchants, or an ``ErrorResponse``:
            401 when no token is available (no request is made), the
            transport's own error, ``DECODING_ERROR`` for a structural
            mismatch, or ``UNKNOWN_DECODING_ERROR`` for anything else.
        """
        token = self._token_provider.get_access_token()
        if not token:
            logger.info("No access token available; skipping merchant fetch")
            return Result.fail("No access token found", status_code=401)

        response = await self._http_client.request(
            Endpoint.merchants(token, path=self.merchants_path)
        )
        if not response.ok:
            return Result.failure(response.error)

        try:
            merchants = decode_merchants(response.unwrap())
        except ValidationError as e:
            logger.error(f"Failed to decode merchant list: {e.error_count()} error(s)")
            return Result.failure(
                classify_decode_error(decode_failure_from_validation_error(e))
            )
        except Exception as e:
            logger.error(f"Unexpected error decoding merchant list: {e}")
            return Result.fail(
                "An unexpected error occurred while decoding the response.",
                error_code=ErrorCode.UNKNOWN_DECODING_ERROR,
                details=str(e) or type(e).__name__,
            )

        logger.info(f"Fetched {len(merchants)} merchant(s)")
        return Result.success(merchants)


def build_merchant_client(
    token_provider: Optional[AccessTokenProvider] = None,
    settings: Optional["MerchantApiSettings"] = None,
    http_client: Optional[HttpClient] = None,
) -> MerchantDirectoryClient:
    """Wire a :class:`MerchantDirectoryClient` from configuration."""
    if settings is None:
        from ticketchecker.config.config_loader import config_loader

        settings = config_loader.get_merchants_config()

    if token_provider is None:
        token_provider = EnvAccessTokenProvider(settings.token_env_var)
    if http_client is None:
        http_client = HttpxTransport(settings.base_url, timeout=settings.timeout)

    return MerchantDirectoryClient(token_provider, http_client, settings.merchants_path)
