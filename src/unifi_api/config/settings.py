"""Pydantic models for UniFi API client configuration."""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Tuple, Type

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from unifi_api.exceptions import ConfigurationError
from unifi_api.models import ControllerType

REQUIRED_FIELDS = ("host", "username", "password")


class ControllerConfig(BaseModel):
    """Connection configuration consumed by UnifiClient.

    Immutable once built. Never reads the environment; use UnifiSettings or
    load_config() for that.

    Example:
        >>> config = ControllerConfig(host="test.local", username="admin", password="secret")
        >>> config.base_url
        'https://test.local:8443'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    host: str = Field(..., description="UniFi Controller hostname or IP address")
    port: int = Field(default=8443, description="Controller port", ge=1, le=65535)
    username: str = Field(..., description="Controller username (local admin account)")
    password: str = Field(..., repr=False, description="Controller password")
    site: str = Field(default="default", description="Site name")
    ssl: bool = Field(default=True, description="Use HTTPS/WSS")
    strict_ssl: bool = Field(
        default=False,
        description="Verify TLS certificates (off accepts self-signed certs)",
    )
    timeout: int = Field(default=30000, description="Request timeout in milliseconds", gt=0)
    controller_type: ControllerType = Field(
        default=ControllerType.SELF_HOSTED,
        description="self_hosted, or unifi_os for UDM/UCG consoles",
    )

    @model_validator(mode="before")
    @classmethod
    def require_credentials(cls, data: Any) -> Any:
        """Fail fast when host, username or password is absent or blank."""
        if not isinstance(data, dict):
            return data
        for name in REQUIRED_FIELDS:
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ConfigurationError()
        return data

    @field_validator("host", "username")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip surrounding whitespace."""
        return v.strip()

    @property
    def scheme(self) -> str:
        """HTTP scheme derived from the ssl flag."""
        return "https" if self.ssl else "http"

    @property
    def base_url(self) -> str:
        """Base address of the controller, e.g. https://192.168.1.1:8443."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def timeout_seconds(self) -> float:
        """Request timeout converted to seconds for httpx."""
        return self.timeout / 1000.0


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads values from a YAML file.

    The YAML file path is determined by the CONFIG_PATH environment variable.
    """

    def get_field_value(
        self, field: Any, field_name: str
    ) -> Tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_config = self._load_yaml_config()
        field_value = yaml_config.get(field_name)
        return field_value, field_name, False

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        config_path = os.environ.get("CONFIG_PATH")
        if not config_path:
            return {}

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (FileNotFoundError, yaml.YAMLError, PermissionError):
            # Errors will be handled by loader.py
            return {}

    def __call__(self) -> Dict[str, Any]:
        """Return the YAML config values."""
        return self._load_yaml_config()


class UnifiSettings(BaseSettings):
    """Application-level settings for programs embedding the client.

    Configuration is loaded in the following precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (UNIFI_ prefix)
    3. .env file
    4. YAML configuration file (via CONFIG_PATH)
    5. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="UNIFI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(..., description="UniFi Controller hostname or IP address")
    username: str = Field(..., description="UniFi admin username (local account)")
    password: str = Field(default="", description="UniFi admin password")
    port: int = Field(default=8443, ge=1, le=65535, description="Controller port")
    site: str = Field(default="default", description="UniFi site name")
    ssl: bool = Field(default=True, description="Use HTTPS/WSS")
    strict_ssl: bool = Field(default=False, description="Verify TLS certificates")
    timeout: int = Field(default=30000, gt=0, description="Request timeout in milliseconds")
    controller_type: ControllerType = Field(
        default=ControllerType.SELF_HOSTED,
        description="self_hosted or unifi_os",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format: json (production) or text (development)",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to set precedence.

        Docker-style ``_FILE`` secrets are applied to the environment by
        loader.py before this runs, so file_secret_settings is not used.
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized == "WARN":
            normalized = "WARNING"
        if normalized not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: DEBUG, INFO, WARNING, ERROR"
            )
        return normalized

    @field_validator("host", "username")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate required strings are not empty."""
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    def to_controller_config(self) -> ControllerConfig:
        """Build the immutable connection configuration the client consumes."""
        return ControllerConfig(
            host=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            site=self.site,
            ssl=self.ssl,
            strict_ssl=self.strict_ssl,
            timeout=self.timeout,
            controller_type=self.controller_type,
        )
