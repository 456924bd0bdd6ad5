"""
ticketchecker - client support layer: secure credential vault and merchant directory client.
"""

__version__ = "0.1.0"

from ticketchecker.credentials import CredentialVault, build_credential_vault
from ticketchecker.errors import ErrorCode, ErrorResponse, Result
from ticketchecker.merchants import MerchantDirectoryClient, build_merchant_client

__all__ = [
    "CredentialVault",
    "ErrorCode",
    "ErrorResponse",
    "MerchantDirectoryClient",
    "Result",
    "build_credential_vault",
    "build_merchant_client",
]
