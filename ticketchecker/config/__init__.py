"""
Configuration management for ticketchecker.

Importing this package only defines the settings models.  The
``config_loader`` singleton, which reads ``.env`` and ``config.yaml``,
lives in :mod:`ticketchecker.config.config_loader` and is created when that
module is first imported.
"""

from ticketchecker.config.schema_models import (
    AppConfig,
    LoggingSettings,
    MerchantApiSettings,
    VaultSettings,
)

__all__ = [
    "AppConfig",
    "LoggingSettings",
    "MerchantApiSettings",
    "VaultSettings",
]
