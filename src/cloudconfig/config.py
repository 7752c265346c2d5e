"""Load options and bootstrap configuration models.

Load options are plain dataclasses validated with ``validate()``; the
bootstrap ``spring.cloud.config`` sub-tree is described by pydantic models
so that every violation is reported at once.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import InvalidBootstrapConfigError, InvalidOptionsError


class Precedence(str, Enum):
    """Order in which the three configuration layers override each other."""
    BOOTSTRAP_HIGHEST = "bootstrap-highest"  # application < remote < bootstrap
    REMOTE_HIGHEST = "remote-highest"        # application < bootstrap < remote


@dataclass
class CloudConfigOptions:
    """Options that drive a single ``load``.

    Attributes:
        config_path: Directory holding ``application.yml`` and its profile overlays
        active_profiles: Active profile names (may be empty, never None)
        bootstrap_path: Directory holding ``bootstrap.yml`` (defaults to config_path)
        level: Log level for the ``cloudconfig`` logger
        file_extension: Extension of the configuration files
        precedence: Layer precedence, bootstrap-highest unless chosen otherwise
    """
    config_path: Optional[str] = None
    active_profiles: Optional[list[str]] = None
    bootstrap_path: Optional[str] = None
    level: Optional[str] = None
    file_extension: str = "yml"
    precedence: Precedence = Precedence.BOOTSTRAP_HIGHEST

    @property
    def resolved_bootstrap_path(self) -> Optional[str]:
        return self.bootstrap_path or self.config_path

    @classmethod
    def from_dict(cls, data: dict) -> "CloudConfigOptions":
        """Create options from a dict with camelCase or snake_case keys."""
        def get(snake: str, camel: str, default=None):
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        precedence = get("precedence", "precedence", Precedence.BOOTSTRAP_HIGHEST)
        try:
            precedence = Precedence(precedence)
        except ValueError as e:
            choices = ", ".join(p.value for p in Precedence)
            raise InvalidOptionsError(
                "Invalid options supplied. Please consult the documentation",
                [f"precedence must be one of: {choices}, got: {precedence!r}"],
            ) from e

        return cls(
            config_path=get("config_path", "configPath"),
            active_profiles=get("active_profiles", "activeProfiles"),
            bootstrap_path=get("bootstrap_path", "bootstrapPath"),
            level=get("level", "level"),
            file_extension=get("file_extension", "fileExtension", "yml"),
            precedence=precedence,
        )

    @classmethod
    def from_env(cls, prefix: str = "SPRING_CONFIG") -> "CloudConfigOptions":
        """Create options from environment variables.

        Environment variables:
            {prefix}_PATH: Application config directory
            {prefix}_BOOTSTRAP_PATH: Bootstrap config directory
            {prefix}_PROFILES: Comma-separated active profiles
            {prefix}_LOG_LEVEL: Log level
        """
        def get(key: str) -> Optional[str]:
            return os.environ.get(f"{prefix}_{key}")

        profiles = get("PROFILES")
        return cls(
            config_path=get("PATH"),
            bootstrap_path=get("BOOTSTRAP_PATH"),
            active_profiles=[p.strip() for p in profiles.split(",") if p.strip()] if profiles else [],
            level=get("LOG_LEVEL"),
        )

    def validate(self) -> list[str]:
        """Validate options, return list of errors."""
        errors = []

        if not self.config_path or not isinstance(self.config_path, str):
            errors.append("config_path is required")
        if self.active_profiles is None:
            errors.append("active_profiles is required")
        elif not isinstance(self.active_profiles, (list, tuple)) or not all(
            isinstance(p, str) for p in self.active_profiles
        ):
            errors.append("active_profiles must be a list of strings")
        if self.bootstrap_path is not None and not isinstance(self.bootstrap_path, str):
            errors.append("bootstrap_path must be a string")
        if self.level is not None and not isinstance(self.level, str):
            errors.append("level must be a string")
        if not self.file_extension:
            errors.append("file_extension cannot be empty")
        if self.precedence not in [p.value for p in Precedence]:
            errors.append(f"precedence must be one of: {', '.join(p.value for p in Precedence)}")

        return errors

    def ensure_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise InvalidOptionsError(
                "Invalid options supplied. Please consult the documentation", errors
            )


class RetryOptions(BaseModel):
    """Retry policy for the remote fetch. Intervals are in milliseconds."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: bool = False
    max_attempts: Optional[int] = Field(default=None, alias="max-attempts", ge=0)
    max_interval: Optional[float] = Field(default=None, alias="max-interval", ge=0)
    initial_interval: Optional[float] = Field(default=None, alias="initial-interval", ge=0)
    multiplier: Optional[float] = Field(default=None, gt=0)


class AuthOptions(BaseModel):
    """Basic auth credentials for the config server."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: str
    password: str = Field(alias="pass")

    def __repr__(self) -> str:
        """Safe repr that masks the password."""
        return f"AuthOptions(user={self.user!r}, password=***)"


class ConfigClientOptions(BaseModel):
    """Remote-fetch options found under ``spring.cloud.config``."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    enabled: bool
    fail_fast: bool = Field(default=False, alias="fail-fast")
    name: Optional[str] = None
    endpoint: Optional[str] = None
    label: Optional[str] = None
    profiles: list[str] = Field(default_factory=list)
    reject_unauthorized: bool = Field(default=True, alias="rejectUnauthorized")
    auth: Optional[AuthOptions] = None
    retry: Optional[RetryOptions] = None
    timeout_seconds: float = Field(default=30.0, alias="timeout", gt=0)

    @field_validator("profiles", mode="before")
    @classmethod
    def _split_profiles(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        return value

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip().startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an HTTP(S) URL, got: {value}")
        return value

    @model_validator(mode="after")
    def _endpoint_required_when_enabled(self) -> "ConfigClientOptions":
        if self.enabled and not self.endpoint:
            raise ValueError("endpoint is required when enabled is true")
        return self

    @property
    def application_name(self) -> str:
        return self.name or "application"

    @classmethod
    def from_bootstrap(cls, bootstrap_config: dict) -> "ConfigClientOptions":
        """Validate and extract the client options from a bootstrap config."""
        return validate_bootstrap_config(bootstrap_config).spring.cloud.config


class _CloudSection(BaseModel):
    model_config = ConfigDict(extra="allow")
    config: ConfigClientOptions


class _SpringSection(BaseModel):
    model_config = ConfigDict(extra="allow")
    cloud: _CloudSection


class BootstrapConfig(BaseModel):
    """Expected shape of the resolved bootstrap configuration."""
    model_config = ConfigDict(extra="allow")
    spring: _SpringSection


def _format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def validate_bootstrap_config(bootstrap_config: Any) -> BootstrapConfig:
    """Validate a bootstrap config, listing every violation on failure.

    Raises:
        InvalidBootstrapConfigError: If the config does not match the schema.
    """
    try:
        return BootstrapConfig.model_validate(bootstrap_config)
    except ValidationError as e:
        raise InvalidBootstrapConfigError(
            "Invalid bootstrap configuration",
            [_format_error(err) for err in e.errors()],
        ) from e
