"""
ConfigLoader for YAML-based configuration with environment variable interpolation.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ticketchecker.config.schema_models import (
    AppConfig,
    LoggingSettings,
    MerchantApiSettings,
    VaultSettings,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


class ConfigLoader:
    """
    Loads and validates YAML configuration with environment variable interpolation.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Optional explicit path to config.yaml
        """
        load_dotenv()
        self.config_path = self._find_config_path(config_path)
        self.config = self._load_config()
        logger.info(f"ConfigLoader: config={self.config_path}")

    def _find_config_path(self, config_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Find the configuration file path.

        Looks in the following locations (in order):
        1. Explicit path provided to constructor
        2. Path specified by the TICKETCHECKER_CONFIG environment variable
        3. Current working directory
        4. User's config directory (~/.config/ticketchecker/)

        Returns:
            Path to the configuration file (which may not exist)
        """
        if config_path:
            path = Path(config_path)
            if path.exists():
                return path
            logger.warning(f"Specified config path does not exist: {path}")

        env_path = os.getenv("TICKETCHECKER_CONFIG")
        if env_path:
            path = Path(env_path)
            if path.exists():
                return path
            logger.warning(
                f"Config path from environment variable does not exist: {path}"
            )

        candidates: List[Path] = [
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "ticketchecker" / "config.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                return candidate

        logger.debug("No config.yaml found. Using default configuration.")
        return candidates[0]

    def _interpolate_env_vars(self, value: Any) -> Any:
        """
        Recursively interpolate environment variables in configuration values.

        Replaces "${ENV_VAR}" or "$ENV_VAR" with the value of the environment
        variable.  Unset variables are left as-is.
        """
        if isinstance(value, str):
            pattern = r"\${([^}]+)}|\$([a-zA-Z0-9_]+)"

            def replace_env_var(match):
                env_var = match.group(1) or match.group(2)
                return os.environ.get(env_var, f"${{{env_var}}}")

            return re.sub(pattern, replace_env_var, value)
        elif isinstance(value, list):
            return [self._interpolate_env_vars(item) for item in value]
        elif isinstance(value, dict):
            return {k: self._interpolate_env_vars(v) for k, v in value.items()}
        else:
            return value

    def _load_config(self) -> AppConfig:
        """
        Load and validate the configuration file.

        Raises:
            ConfigError: If the configuration file cannot be parsed or is invalid
        """
        if not self.config_path.exists():
            return AppConfig()

        try:
            with open(self.config_path, "r") as f:
                raw: Dict[str, Any] = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            error_msg = f"Error parsing {self.config_path}: {e}"
            logger.error(error_msg)
            raise ConfigError(error_msg) from e

        if not isinstance(raw, dict):
            raise ConfigError(
                f"Configuration root must be a mapping, got {type(raw).__name__}"
            )

        try:
            return AppConfig.model_validate(self._interpolate_env_vars(raw))
        except ValidationError as e:
            first = e.errors()[0]
            path = " -> ".join(str(p) for p in first["loc"])
            message = f"Configuration validation error: {first['msg']}"
            if path:
                message = f"{message} (at {path})"
            raise ConfigError(message) from e

    def get_config(self) -> AppConfig:
        return self.config

    def get_vault_config(self) -> VaultSettings:
        return self.config.vault

    def get_merchants_config(self) -> MerchantApiSettings:
        return self.config.merchants

    def get_logging_config(self) -> LoggingSettings:
        return self.config.logging


# Create a singleton instance
config_loader = ConfigLoader()
