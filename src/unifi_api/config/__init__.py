"""Configuration management for the UniFi API client."""

from unifi_api.config.loader import format_validation_errors, load_config
from unifi_api.config.settings import ControllerConfig, UnifiSettings

__all__ = [
    "ControllerConfig",
    "UnifiSettings",
    "format_validation_errors",
    "load_config",
]
