"""Service configuration management for the compatibility gate API."""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..gate.options import (
    ANDROID_STORE_URL,
    DEFAULT_BYPASS_PATHS,
    DEFAULT_MIN_SUPPORTED_VERSION,
    IOS_STORE_URL,
    GateConfig,
    StoreUrls,
    validate_path_prefix,
    validate_version_string,
)

ENV_PREFIX = "COMPAT_GATE_"


class Environment(str, Enum):
    """Environment types for configuration management."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class GateSettings(BaseSettings):
    """Compatibility gate service configuration."""

    model_config = {
        "env_prefix": ENV_PREFIX,
        "env_file": ".env",
        "case_sensitive": False,
        "frozen": True,
    }

    # Environment Settings
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: str = Field(default="INFO", description="Logging level")

    # API Settings
    host: str = Field(default="127.0.0.1", description="API host address")
    port: int = Field(default=8080, description="API port")
    cors_allowed_origins: List[str] = ["*"]

    # Version policy
    min_supported_version: str = Field(
        default=DEFAULT_MIN_SUPPORTED_VERSION, description="Oldest client version served"
    )
    latest_version: Optional[str] = Field(
        default=None, description="Newest published client version"
    )

    # Version signal headers
    version_header: str = "X-App-Version"
    version_header_alias: str = "X-Client-Version"
    client_identifier_header: str = "User-Agent"
    client_product_name: str = "BenimMarketim"
    platform_header: str = "X-App-Platform"

    # Bypass rules
    gate_path_prefix: str = "/api"
    bypass_paths: List[str] = Field(default_factory=lambda: list(DEFAULT_BYPASS_PATHS))
    admin_path_prefix: str = "/api/admin"
    admin_origin_marker: str = "admin"

    # Update notice
    ios_store_url: str = IOS_STORE_URL
    android_store_url: str = ANDROID_STORE_URL
    update_title: str = "Update required"
    update_message: str = (
        "This version of the app is no longer supported. "
        "Please update from the App Store or Play Store to continue."
    )
    force_update: bool = True

    # Monitoring
    enable_metrics: bool = True

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase for logging compatibility."""
        return v.upper()

    @field_validator("min_supported_version")
    @classmethod
    def check_min_version(cls, v: str) -> str:
        return validate_version_string(v)

    @field_validator("latest_version")
    @classmethod
    def check_latest_version(cls, v: Optional[str]) -> Optional[str]:
        return validate_version_string(v) if v else None

    @field_validator("gate_path_prefix", "admin_path_prefix")
    @classmethod
    def check_prefix(cls, v: str) -> str:
        return validate_path_prefix(v)

    @field_validator("bypass_paths")
    @classmethod
    def check_bypass_paths(cls, v: List[str]) -> List[str]:
        return [validate_path_prefix(p) for p in v]

    @property
    def effective_latest_version(self) -> str:
        return self.latest_version or self.min_supported_version

    def to_gate_config(self) -> GateConfig:
        """Build the immutable gate configuration from these settings."""
        return GateConfig(
            min_supported_version=self.min_supported_version,
            version_header=self.version_header,
            version_header_alias=self.version_header_alias,
            client_identifier_header=self.client_identifier_header,
            client_product_name=self.client_product_name,
            platform_header=self.platform_header,
            gate_path_prefix=self.gate_path_prefix,
            bypass_paths=tuple(self.bypass_paths),
            admin_path_prefix=self.admin_path_prefix,
            admin_origin_marker=self.admin_origin_marker,
            store_urls=StoreUrls(ios=self.ios_store_url, android=self.android_store_url),
            update_title=self.update_title,
            update_message=self.update_message,
            force_update=self.force_update,
        )

    @classmethod
    def get_environment_defaults(cls, env: Environment) -> Dict[str, Any]:
        """Get environment-specific default values."""
        if env == Environment.PRODUCTION:
            return {"environment": env, "debug": False, "log_level": "WARNING"}
        elif env == Environment.STAGING:
            return {"environment": env, "debug": True, "log_level": "INFO"}
        else:  # Development
            return {"environment": env, "debug": True, "log_level": "DEBUG"}


class ConfigManager:
    """Manages configuration loading and environment detection."""

    def __init__(self):
        self._config: Optional[GateSettings] = None
        self._config_file_path: Optional[str] = None

    def load_config(self, config_file: Optional[str] = None) -> GateSettings:
        """
        Load configuration from environment presets, a config file and env vars.

        Args:
            config_file: Optional path to a JSON or TOML configuration file

        Returns:
            Loaded configuration instance
        """
        # Values explicitly provided through the environment or .env
        env_settings = GateSettings()
        env_overrides = {
            name: getattr(env_settings, name) for name in env_settings.model_fields_set
        }

        values = GateSettings.get_environment_defaults(env_settings.environment)

        if config_file:
            values.update(self._load_from_file(config_file))

        # Environment variables have the highest priority
        values.update(env_overrides)

        config = GateSettings(**values)
        self._config = config
        return config

    def _load_from_file(self, config_file: str) -> Dict[str, Any]:
        """Load configuration overrides from JSON or TOML files.

        Args:
            config_file: Path to the configuration file provided by the user.

        Returns:
            Parsed key/value pairs that should override the base configuration.

        Raises:
            ValueError: If the file cannot be read or parsed.
        """
        config_path = Path(config_file)
        self._config_file_path = str(config_path)

        if not config_path.exists():
            raise ValueError(f"Config file not found: {config_file}")

        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"Error reading config file {config_file}: {exc}") from exc

        if config_path.suffix.lower() == ".toml":
            return self._parse_toml_content(content, config_file)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            if config_path.suffix.lower() == ".json":
                raise ValueError(f"Invalid JSON in config file {config_file}: {exc}") from exc
            return self._parse_toml_content(content, config_file)

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_file} must contain an object")
        return data

    def _parse_toml_content(self, content: str, config_file: str) -> Dict[str, Any]:
        """Parse TOML configuration content.

        Raises:
            ValueError: If TOML parsing fails.
        """
        import tomllib

        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid TOML in config file {config_file}: {exc}") from exc

    @property
    def config(self) -> Optional[GateSettings]:
        """Get the current loaded configuration."""
        return self._config

    @property
    def config_file_path(self) -> Optional[str]:
        return self._config_file_path
