"""Exception hierarchy for configuration resolution.

Every failure raised by ``load`` derives from :class:`ConfigError`, so callers
can catch a single type at startup.
"""

from typing import Optional


class ConfigError(Exception):
    """Base class for all configuration errors."""


class ValidationFailedError(ConfigError):
    """Base class for errors that carry a list of violations.

    Attributes:
        errors: Every violation found, in the order it was detected.
    """

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class InvalidOptionsError(ValidationFailedError):
    """Load options are missing a required field or have the wrong type."""


class InvalidBootstrapConfigError(ValidationFailedError):
    """The resolved bootstrap configuration does not match the expected shape."""


class ConfigFileNotFoundError(ConfigError):
    """A required configuration file (bootstrap or application) is missing."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigReadError(ConfigError):
    """A configuration file exists but could not be read or parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Error reading configuration file {path}: {reason}")


class RemoteFetchError(ConfigError):
    """The remote configuration server could not be reached or answered badly."""


class RetryExhaustedError(ConfigError):
    """Every configured retry attempt of the remote fetch failed."""

    def __init__(self, message: str = "Error retrieving remote configuration: Maximum retries exceeded."):
        super().__init__(message)


class NotLoadedError(ConfigError):
    """The configuration was accessed before a successful ``load``."""

    def __init__(self, message: str = "Configuration hasn't been loaded yet. Call load() first."):
        super().__init__(message)
