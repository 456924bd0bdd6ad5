"""Access-token providers for the merchant directory client."""

import logging
import os
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class AccessTokenProvider(Protocol):
    def get_access_token(self) -> Optional[str]:
        ...


class StaticAccessTokenProvider:
    """Returns a fixed token (or none)."""

    def __init__(self, token: Optional[str]):
        self._token = token

    def get_access_token(self) -> Optional[str]:
        return self._token or None


class EnvAccessTokenProvider:
    """Reads the session token from an environment variable on every call."""

    def __init__(self, var: str = "TICKETCHECKER_ACCESS_TOKEN"):
        self.var = var

    def get_access_token(self) -> Optional[str]:
        token = os.environ.get(self.var, "").strip()
        if not token:
            logger.debug(f"{self.var} not set")
        return token or None
