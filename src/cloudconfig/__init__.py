"""Layered application configuration loader.

Resolves an application's configuration from a bootstrap file, profile
specific application files, environment variables and an optional Spring
Cloud Config server, merged with a fixed precedence.

Usage:
    import cloudconfig

    settings = await cloudconfig.load({
        "configPath": "./config",
        "activeProfiles": ["dev"],
    })

    # anywhere else, after load() completed
    settings = cloudconfig.instance()
"""

from typing import Any, Union

from .config import (
    CloudConfigOptions,
    ConfigClientOptions,
    Precedence,
    RetryOptions,
    validate_bootstrap_config,
)
from .container import Container
from .documents import should_use_document
from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigReadError,
    InvalidBootstrapConfigError,
    InvalidOptionsError,
    NotLoadedError,
    RemoteFetchError,
    RetryExhaustedError,
)
from .loader import Loaded, NotLoaded, SpringCloudConfig
from .retry import RetryState
from .utils import merge_properties, parse_properties_to_objects

__version__ = "1.0.0"

# Process-wide default loader used by the module-level functions
Config: SpringCloudConfig = Container().config


async def load(options: Union[CloudConfigOptions, dict]) -> dict[str, Any]:
    """Load the configuration with the default loader."""
    return await Config.load(options)


def instance() -> dict[str, Any]:
    """Return the configuration loaded by :func:`load`."""
    return Config.instance()


__all__ = [
    "load",
    "instance",
    "Config",
    "Container",
    "SpringCloudConfig",
    "Loaded",
    "NotLoaded",
    "CloudConfigOptions",
    "ConfigClientOptions",
    "RetryOptions",
    "RetryState",
    "Precedence",
    "validate_bootstrap_config",
    "should_use_document",
    "merge_properties",
    "parse_properties_to_objects",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigReadError",
    "InvalidBootstrapConfigError",
    "InvalidOptionsError",
    "NotLoadedError",
    "RemoteFetchError",
    "RetryExhaustedError",
]
