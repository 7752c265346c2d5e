"""Tests for load options and bootstrap configuration models."""

import os
import pytest
from unittest.mock import patch

from pydantic import ValidationError

from cloudconfig.config import (
    CloudConfigOptions,
    ConfigClientOptions,
    Precedence,
    RetryOptions,
    validate_bootstrap_config,
)
from cloudconfig.errors import InvalidBootstrapConfigError, InvalidOptionsError


def bootstrap(**config):
    return {"spring": {"cloud": {"config": config}}}


class TestCloudConfigOptions:
    """Tests for CloudConfigOptions."""

    def test_defaults(self):
        options = CloudConfigOptions(config_path="./config", active_profiles=[])

        assert options.bootstrap_path is None
        assert options.resolved_bootstrap_path == "./config"
        assert options.file_extension == "yml"
        assert options.precedence == Precedence.BOOTSTRAP_HIGHEST
        assert options.validate() == []

    def test_bootstrap_path_override(self):
        options = CloudConfigOptions(
            config_path="./config", bootstrap_path="./boot", active_profiles=[]
        )

        assert options.resolved_bootstrap_path == "./boot"

    def test_missing_required_fields(self):
        errors = CloudConfigOptions().validate()

        assert "config_path is required" in errors
        assert "active_profiles is required" in errors

    def test_profiles_must_be_list_of_strings(self):
        options = CloudConfigOptions(config_path="./config", active_profiles="dev")

        assert options.validate() == ["active_profiles must be a list of strings"]

    def test_profiles_not_iterable(self):
        options = CloudConfigOptions(config_path="./config", active_profiles=5)

        assert options.validate() == ["active_profiles must be a list of strings"]

    def test_unknown_precedence(self):
        options = CloudConfigOptions(
            config_path="./config", active_profiles=[], precedence="bogus"
        )

        assert options.validate() == [
            "precedence must be one of: bootstrap-highest, remote-highest"
        ]

    def test_from_dict_unknown_precedence(self):
        with pytest.raises(InvalidOptionsError, match="precedence must be one of"):
            CloudConfigOptions.from_dict({
                "configPath": "./config",
                "activeProfiles": [],
                "precedence": "bogus",
            })

    def test_ensure_valid_lists_all_errors(self):
        with pytest.raises(InvalidOptionsError) as exc_info:
            CloudConfigOptions().ensure_valid()

        assert len(exc_info.value.errors) == 2
        assert "Invalid options supplied" in str(exc_info.value)

    def test_from_dict_camel_case(self):
        options = CloudConfigOptions.from_dict({
            "bootstrapPath": "./boot",
            "configPath": "./config",
            "activeProfiles": ["dev"],
            "level": "debug",
        })

        assert options.bootstrap_path == "./boot"
        assert options.config_path == "./config"
        assert options.active_profiles == ["dev"]
        assert options.level == "debug"

    def test_from_dict_snake_case(self):
        options = CloudConfigOptions.from_dict({
            "config_path": "./config",
            "active_profiles": [],
            "precedence": "remote-highest",
        })

        assert options.config_path == "./config"
        assert options.precedence == Precedence.REMOTE_HIGHEST

    def test_from_env(self):
        env = {
            "SPRING_CONFIG_PATH": "/etc/app",
            "SPRING_CONFIG_PROFILES": "dev, east",
            "SPRING_CONFIG_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env):
            options = CloudConfigOptions.from_env()

        assert options.config_path == "/etc/app"
        assert options.active_profiles == ["dev", "east"]
        assert options.level == "debug"
        assert options.bootstrap_path is None

    def test_from_env_without_profiles(self):
        with patch.dict(os.environ, {}, clear=True):
            options = CloudConfigOptions.from_env()

        assert options.active_profiles == []
        assert options.config_path is None


class TestConfigClientOptions:
    """Tests for ConfigClientOptions."""

    def test_aliases(self):
        options = ConfigClientOptions.model_validate({
            "enabled": True,
            "fail-fast": True,
            "endpoint": "http://localhost:8888",
            "rejectUnauthorized": False,
            "auth": {"user": "admin", "pass": "secret"},
            "retry": {"enabled": True, "max-attempts": 3},
        })

        assert options.fail_fast is True
        assert options.reject_unauthorized is False
        assert options.auth.password == "secret"
        assert options.retry.max_attempts == 3

    def test_defaults(self):
        options = ConfigClientOptions(enabled=False)

        assert options.fail_fast is False
        assert options.reject_unauthorized is True
        assert options.profiles == []
        assert options.retry is None
        assert options.application_name == "application"

    def test_profiles_from_string(self):
        options = ConfigClientOptions(enabled=False, profiles="dev, east")

        assert options.profiles == ["dev", "east"]

    def test_auth_repr_masks_password(self):
        options = ConfigClientOptions.model_validate({
            "enabled": False,
            "auth": {"user": "admin", "pass": "secret"},
        })

        assert "secret" not in repr(options.auth)

    def test_from_bootstrap(self):
        options = ConfigClientOptions.from_bootstrap(
            bootstrap(enabled=True, name="app", endpoint="http://localhost:8888")
        )

        assert options.name == "app"
        assert options.endpoint == "http://localhost:8888"


class TestRetryOptions:
    """Tests for RetryOptions."""

    def test_defaults(self):
        options = RetryOptions()

        assert options.enabled is False
        assert options.max_attempts is None
        assert options.multiplier is None

    def test_immutable(self):
        options = RetryOptions(enabled=True)

        with pytest.raises(ValidationError):
            options.enabled = False


class TestValidateBootstrapConfig:
    """Tests for validate_bootstrap_config()."""

    def test_valid_enabled(self):
        result = validate_bootstrap_config(
            bootstrap(enabled=True, endpoint="http://localhost:8888", label="master")
        )

        assert result.spring.cloud.config.enabled is True

    def test_valid_disabled_without_endpoint(self):
        result = validate_bootstrap_config(bootstrap(enabled=False))

        assert result.spring.cloud.config.enabled is False

    def test_extra_keys_allowed(self):
        config = bootstrap(enabled=False)
        config["server"] = {"port": 8080}

        validate_bootstrap_config(config)

    def test_missing_spring_section(self):
        with pytest.raises(InvalidBootstrapConfigError) as exc_info:
            validate_bootstrap_config({"server": {"port": 8080}})

        assert exc_info.value.errors[0].startswith("spring")

    def test_missing_enabled(self):
        with pytest.raises(InvalidBootstrapConfigError) as exc_info:
            validate_bootstrap_config(bootstrap(name="app"))

        assert any("enabled" in error for error in exc_info.value.errors)

    def test_endpoint_required_when_enabled(self):
        with pytest.raises(InvalidBootstrapConfigError, match="endpoint is required"):
            validate_bootstrap_config(bootstrap(enabled=True))

    def test_endpoint_must_be_http_url(self):
        with pytest.raises(InvalidBootstrapConfigError, match="HTTP"):
            validate_bootstrap_config(bootstrap(enabled=True, endpoint="ftp://server"))

    def test_reports_every_violation(self):
        with pytest.raises(InvalidBootstrapConfigError) as exc_info:
            validate_bootstrap_config(
                bootstrap(enabled="not-a-bool", endpoint="ftp://server", auth={"user": "a"})
            )

        assert len(exc_info.value.errors) == 3
