"""Tests for connection configuration and settings loading."""

import pytest
from pydantic import ValidationError

from unifi_api.api.client import UnifiClient
from unifi_api.config import ControllerConfig, UnifiSettings, load_config
from unifi_api.exceptions import ConfigurationError
from unifi_api.models import ControllerType, ErrorCode


class TestControllerConfig:
    """Tests for ControllerConfig validation and derived values."""

    @pytest.mark.parametrize(
        "values",
        [
            {"username": "admin", "password": "secret"},
            {"host": "test.local", "password": "secret"},
            {"host": "test.local", "username": "admin"},
            {"host": "", "username": "admin", "password": "secret"},
            {"host": "test.local", "username": "   ", "password": "secret"},
        ],
    )
    def test_missing_required_field_raises(self, values):
        """Host, username and password must all be present and non-blank."""
        with pytest.raises(ConfigurationError) as exc_info:
            ControllerConfig(**values)

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert "Host, username, and password are required" in str(exc_info.value)

    def test_defaults(self, config):
        """Unset options take their documented defaults."""
        assert config.port == 8443
        assert config.site == "default"
        assert config.ssl is True
        assert config.strict_ssl is False
        assert config.timeout == 30000
        assert config.controller_type == ControllerType.SELF_HOSTED

    def test_base_url_https(self, config):
        """Base URL uses https when ssl is on."""
        assert config.base_url == "https://test.local:8443"

    def test_base_url_http_when_ssl_disabled(self):
        """Base URL uses http when ssl is off."""
        config = ControllerConfig(
            host="test.local", port=8080, username="admin", password="secret", ssl=False
        )

        assert config.base_url == "http://test.local:8080"

    def test_timeout_seconds(self):
        """Millisecond timeout is converted for httpx."""
        config = ControllerConfig(
            host="test.local", username="admin", password="secret", timeout=5000
        )

        assert config.timeout_seconds == 5.0

    def test_invalid_port_rejected(self):
        """Port must be within 1-65535."""
        with pytest.raises(ValidationError):
            ControllerConfig(host="test.local", username="admin", password="secret", port=70000)

    def test_immutable(self, config):
        """Configuration cannot be changed after construction."""
        with pytest.raises(ValidationError):
            config.site = "other"

    def test_password_not_in_repr(self, config):
        """Password is never rendered in repr."""
        assert "secret" not in repr(config)

    def test_host_whitespace_stripped(self):
        """Surrounding whitespace in host is removed."""
        config = ControllerConfig(host="  test.local ", username="admin", password="secret")

        assert config.base_url == "https://test.local:8443"


class TestClientConfiguration:
    """Tests for building a client from loose options."""

    def test_client_from_mapping(self):
        """A plain mapping is accepted in place of a ControllerConfig."""
        client = UnifiClient({"host": "test.local", "username": "admin", "password": "secret"})

        assert client.base_url == "https://test.local:8443"
        assert client.site == "default"

    def test_client_from_keywords(self):
        """Keyword options build the configuration."""
        client = UnifiClient(host="test.local", username="admin", password="secret", site="lab")

        assert client.site == "lab"

    def test_keywords_override_config(self, config):
        """Keyword options override fields of a given config."""
        client = UnifiClient(config, site="branch")

        assert client.site == "branch"
        assert config.site == "default"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"password": ""},
            {"username": "  "},
            {"port": "notaport"},
            {"timeout": 0},
        ],
    )
    def test_keyword_overrides_are_validated(self, config, overrides):
        """Overrides on a given config go through the same validation."""
        with pytest.raises(ConfigurationError):
            UnifiClient(config, **overrides)

    def test_missing_password_raises(self):
        """Missing credentials fail before any network activity."""
        with pytest.raises(ConfigurationError):
            UnifiClient(host="test.local", username="admin")

    def test_invalid_value_raises_configuration_error(self):
        """Field validation errors surface as ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            UnifiClient(host="test.local", username="admin", password="secret", port=0)

        assert "port" in str(exc_info.value)


class TestUnifiSettings:
    """Tests for environment-driven settings."""

    def test_from_environment(self, monkeypatch):
        """UNIFI_ prefixed variables populate settings."""
        monkeypatch.setenv("UNIFI_HOST", "10.0.0.1")
        monkeypatch.setenv("UNIFI_USERNAME", "admin")
        monkeypatch.setenv("UNIFI_PASSWORD", "secret")
        monkeypatch.setenv("UNIFI_PORT", "443")
        monkeypatch.setenv("UNIFI_CONTROLLER_TYPE", "unifi_os")

        settings = UnifiSettings()

        assert settings.host == "10.0.0.1"
        assert settings.port == 443
        assert settings.controller_type == ControllerType.UNIFI_OS

    def test_to_controller_config(self):
        """Settings convert to the immutable client configuration."""
        settings = UnifiSettings(
            host="test.local", username="admin", password="secret", site="lab", ssl=False
        )

        config = settings.to_controller_config()

        assert isinstance(config, ControllerConfig)
        assert config.base_url == "http://test.local:8443"
        assert config.site == "lab"

    def test_to_controller_config_without_password(self):
        """An empty password is rejected when building the client config."""
        settings = UnifiSettings(host="test.local", username="admin")

        with pytest.raises(ConfigurationError):
            settings.to_controller_config()

    @pytest.mark.parametrize(("given", "expected"), [("debug", "DEBUG"), ("warn", "WARNING")])
    def test_log_level_normalized(self, given, expected):
        """Log levels are upper-cased and WARN is aliased."""
        settings = UnifiSettings(
            host="test.local", username="admin", password="secret", log_level=given
        )

        assert settings.log_level == expected

    def test_invalid_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            UnifiSettings(host="test.local", username="admin", password="secret", log_level="LOUD")


class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_yaml_file(self, tmp_path):
        """Values are read from the YAML file."""
        path = tmp_path / "config.yaml"
        path.write_text("host: yaml.local\nusername: admin\npassword: secret\nsite: lab\n")

        settings = load_config(str(path))

        assert settings.host == "yaml.local"
        assert settings.site == "lab"

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        """Environment variables take precedence over the YAML file."""
        path = tmp_path / "config.yaml"
        path.write_text("host: yaml.local\nusername: admin\npassword: secret\n")
        monkeypatch.setenv("CONFIG_PATH", str(path))
        monkeypatch.setenv("UNIFI_HOST", "env.local")

        settings = load_config()

        assert settings.host == "env.local"

    def test_file_secret_resolved(self, tmp_path, monkeypatch):
        """UNIFI_*_FILE variables are read as Docker secrets."""
        secret = tmp_path / "password"
        secret.write_text("from-file\n")
        monkeypatch.setenv("UNIFI_HOST", "test.local")
        monkeypatch.setenv("UNIFI_USERNAME", "admin")
        monkeypatch.setenv("UNIFI_PASSWORD_FILE", str(secret))

        settings = load_config()

        assert settings.password == "from-file"

    def test_missing_file_raises(self, tmp_path):
        """A config path that does not exist is reported clearly."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(str(tmp_path / "missing.yaml"))

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml_raises(self, tmp_path):
        """Malformed YAML is reported as a configuration error."""
        path = tmp_path / "config.yaml"
        path.write_text("host: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(str(path))

        assert "Invalid YAML" in str(exc_info.value)

    def test_missing_host_reported(self):
        """Missing required settings name the variable to set."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert "'host' is required" in str(exc_info.value)
        assert "UNIFI_HOST" in str(exc_info.value)
