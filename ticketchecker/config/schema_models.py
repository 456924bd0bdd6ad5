"""
Pydantic models for the ticketchecker configuration file.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ticketchecker.credentials.interfaces import AccessPolicy, AuthPolicy

_UNRESOLVED_ENV = re.compile(r"\$\{[^}]+\}|^\$[a-zA-Z0-9_]+$")


class VaultSettings(BaseModel):
    """Settings for the single-slot credential vault."""

    service_name: str = Field(
        default="com.ticketchecker.credentials",
        min_length=1,
        description="Secure-store service identifier.",
    )
    account: str = Field(
        default="user_credentials",
        min_length=1,
        description="Account key of the single stored credential.",
    )
    access_policy: AccessPolicy = AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY
    auth_policy: AuthPolicy = AuthPolicy.DEVICE_OWNER_AUTHENTICATION
    auth_reason: str = Field(
        default="Authenticate to unlock your stored account details",
        min_length=1,
    )
    store_path: Optional[str] = Field(
        default=None,
        description="Directory for the encrypted file store (None = in-memory).",
    )
    master_key: Optional[str] = Field(
        default=None, description="Master key for the encrypted file store."
    )
    passcode_set: bool = Field(
        default=True,
        description="Whether the device has a passcode; gated writes fail without one.",
    )

    @field_validator("master_key")
    @classmethod
    def _drop_unresolved_placeholder(cls, value: Optional[str]) -> Optional[str]:
        # An unset ${VAR} survives interpolation verbatim and must not become a key.
        if value is None or _UNRESOLVED_ENV.search(value) or not value.strip():
            return None
        return value


class MerchantApiSettings(BaseModel):
    """Settings for the merchant directory endpoint."""

    base_url: str = "https://api.ticketchecker.app"
    merchants_path: str = "/merchants"
    timeout: float = Field(default=15.0, gt=0)
    token_env_var: str = "TICKETCHECKER_ACCESS_TOKEN"


class LoggingSettings(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    """Root of ``config.yaml``."""

    vault: VaultSettings = Field(default_factory=VaultSettings)
    merchants: MerchantApiSettings = Field(default_factory=MerchantApiSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
