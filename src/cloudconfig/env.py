"""Configuration overrides read from the process environment."""

import json
import logging
import os
from typing import Any, Mapping, Optional

from .errors import InvalidBootstrapConfigError
from .utils import mask_secrets, parse_properties_to_objects

logger = logging.getLogger(__name__)

APPLICATION_JSON_VARIABLE = "APPLICATION_JSON"

# Environment variable -> dotted configuration path
PREDEFINED_ENV_PROPERTIES: dict[str, str] = {
    "SPRING_CONFIG_ENDPOINT": "spring.cloud.config.endpoint",
    "SPRING_CONFIG_AUTH_USER": "spring.cloud.config.auth.user",
    "SPRING_CONFIG_AUTH_PASS": "spring.cloud.config.auth.pass",
}


def get_application_json_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Return the properties defined by the ``APPLICATION_JSON`` variable.

    Dotted keys inside the JSON object are expanded into nested dicts.

    Raises:
        InvalidBootstrapConfigError: If the variable is not a JSON object.
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(APPLICATION_JSON_VARIABLE)
    if raw is None or not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidBootstrapConfigError(
            f"{APPLICATION_JSON_VARIABLE} is not valid JSON", [str(e)]
        ) from e
    if not isinstance(data, dict):
        raise InvalidBootstrapConfigError(
            f"{APPLICATION_JSON_VARIABLE} must be a JSON object",
            [f"got {type(data).__name__}"],
        )

    properties = parse_properties_to_objects(data)
    logger.debug(f"Application JSON from env: {mask_secrets(properties)}")
    return properties


def get_predefined_env_properties(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Map the predefined environment variables onto their config paths."""
    environ = os.environ if environ is None else environ
    flat = {
        path: environ[variable]
        for variable, path in PREDEFINED_ENV_PROPERTIES.items()
        if variable in environ
    }

    properties = parse_properties_to_objects(flat)
    logger.debug(f"Predefined properties from env: {mask_secrets(properties)}")
    return properties
