"""Configuration loading with YAML, environment override, and Docker secrets support."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml
from pydantic import ValidationError

from unifi_api.config.settings import UnifiSettings
from unifi_api.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


def resolve_file_secrets() -> Dict[str, str]:
    """Resolve Docker secrets pattern (_FILE suffix) from environment.

    Scans environment for variables matching UNIFI_*_FILE pattern,
    reads the file contents, and returns a dict of the base variable
    names to their values.

    Example:
        UNIFI_PASSWORD_FILE=/run/secrets/unifi_password
        -> Returns {"PASSWORD": "<file contents>"}
    """
    secrets: Dict[str, str] = {}
    prefix = "UNIFI_"
    suffix = "_FILE"

    for key, filepath in os.environ.items():
        if key.startswith(prefix) and key.endswith(suffix):
            base_name = key[len(prefix) : -len(suffix)]
            path = Path(filepath)
            if not path.exists():
                # Let validation report the missing value
                logger.warning("secret_file_not_found", env_var=key, path=filepath)
                continue
            try:
                secrets[base_name] = path.read_text().strip()
            except PermissionError:
                raise ConfigurationError(
                    f"Cannot read secret file '{filepath}' specified by {key}: permission denied"
                )
            except OSError as e:
                raise ConfigurationError(
                    f"Error reading secret file '{filepath}' specified by {key}: {e}"
                )

    return secrets


def load_yaml_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file if specified.

    Args:
        config_path: Path to YAML config file. If None, checks CONFIG_PATH env var.

    Returns:
        Dict of configuration values from YAML, or empty dict if no file.
    """
    path = config_path or os.environ.get("CONFIG_PATH")

    if not path:
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            hint="Ensure CONFIG_PATH points to a valid YAML file, or unset it to use environment variables only.",
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}")
    except PermissionError:
        raise ConfigurationError(f"Cannot read configuration file {path}: permission denied")


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Format Pydantic validation errors into user-friendly messages."""
    messages: List[str] = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        input_val = error.get("input")

        if "missing" in msg.lower() or "required" in msg.lower():
            hint = f"Set UNIFI_{loc.upper()} environment variable or add '{loc}:' to config file."
            messages.append(f"Configuration error: '{loc}' is required. {hint}")
        elif input_val is not None and loc != "password":
            messages.append(f"Configuration error: '{loc}' {msg}, got: {input_val}")
        else:
            messages.append(f"Configuration error: '{loc}' {msg}")

    return messages


def load_config(config_path: Optional[str] = None) -> UnifiSettings:
    """Load and validate application settings.

    Configuration is loaded with the following precedence:
    1. Environment variables (highest priority)
    2. Docker secrets (_FILE pattern)
    3. YAML configuration file
    4. Default values (lowest priority)

    Args:
        config_path: Optional path to YAML config file (sets CONFIG_PATH env).

    Returns:
        Validated UnifiSettings instance.

    Raises:
        ConfigurationError: If the configuration cannot be read or is invalid.
    """
    if config_path:
        os.environ["CONFIG_PATH"] = config_path

    # Validate the YAML file up front for better errors; the settings
    # source does the actual loading
    _ = load_yaml_config()

    for key, value in resolve_file_secrets().items():
        env_key = f"UNIFI_{key}"
        if env_key not in os.environ:
            os.environ[env_key] = value

    try:
        return UnifiSettings()
    except ValidationError as e:
        messages = format_validation_errors(e.errors())
        raise ConfigurationError("\n".join(messages)) from e
