"""Merchant directory client and its collaborators."""

from ticketchecker.merchants.client import MerchantDirectoryClient, build_merchant_client
from ticketchecker.merchants.decoding import (
    DecodeFailure,
    DecodeFailureKind,
    classify_decode_error,
    decode_failure_from_validation_error,
)
from ticketchecker.merchants.models import Merchant
from ticketchecker.merchants.tokens import (
    AccessTokenProvider,
    EnvAccessTokenProvider,
    StaticAccessTokenProvider,
)
from ticketchecker.merchants.transport import Endpoint, HttpClient, HttpxTransport

__all__ = [
    "AccessTokenProvider",
    "DecodeFailure",
    "DecodeFailureKind",
    "Endpoint",
    "EnvAccessTokenProvider",
    "HttpClient",
    "HttpxTransport",
    "Merchant",
    "MerchantDirectoryClient",
    "StaticAccessTokenProvider",
    "build_merchant_client",
    "classify_decode_error",
    "decode_failure_from_validation_error",
]
