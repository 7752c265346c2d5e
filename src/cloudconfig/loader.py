"""Configuration resolution: reads every source and merges them.

Resolution order for one ``load``:
    1. validate the load options
    2. read ``bootstrap.yml`` (profile-filtered) and overlay environment overrides
    3. read ``application.yml`` plus ``application-{profile}.yml`` overlays
    4. let the application config override the remote application name
    5. fetch the remote configuration (optional, may retry)
    6. merge application < remote < bootstrap (bootstrap wins)
"""

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .config import CloudConfigOptions, Precedence, validate_bootstrap_config
from .documents import aread_profile_document, aread_yaml_as_document
from .env import get_application_json_from_env, get_predefined_env_properties
from .errors import ConfigReadError, InvalidOptionsError, NotLoadedError
from .service import SpringCloudConfigService
from .utils import get_property, mask_secrets, merge_properties

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "cloudconfig"
APP_NAME_KEY = "spring.cloud.config.name"


@dataclass(frozen=True)
class NotLoaded:
    """No successful load has completed yet."""


@dataclass(frozen=True)
class Loaded:
    """A load completed; holds the merged configuration."""
    config: dict[str, Any] = field(default_factory=dict)


LoadState = Union[NotLoaded, Loaded]


class SpringCloudConfig:
    """Loads and holds an application's layered configuration.

    Usage:
        config = SpringCloudConfig(service)
        settings = await config.load(CloudConfigOptions(
            config_path="./config",
            active_profiles=["dev"],
        ))

        # later, anywhere holding the same object
        settings = config.instance()
    """

    def __init__(self, service: SpringCloudConfigService):
        self.service = service
        self._state: LoadState = NotLoaded()

    @property
    def state(self) -> LoadState:
        return self._state

    async def load(self, options: Union[CloudConfigOptions, dict]) -> dict[str, Any]:
        """Read all property sources and merge them into one config.

        Args:
            options: Load options (or a dict accepted by ``CloudConfigOptions.from_dict``).

        Returns:
            The merged configuration. The caller owns the returned dict.

        Raises:
            InvalidOptionsError: If required options are missing.
            InvalidBootstrapConfigError: If the bootstrap config is malformed.
            ConfigFileNotFoundError: If bootstrap or application file is missing.
            ConfigReadError: If a required file cannot be parsed.
            RemoteFetchError: If the remote fetch fails with fail-fast on.
            RetryExhaustedError: If every retry of the remote fetch failed.
        """
        if isinstance(options, dict):
            options = CloudConfigOptions.from_dict(options)
        elif not isinstance(options, CloudConfigOptions):
            raise InvalidOptionsError(
                "Invalid options supplied. Please consult the documentation",
                [f"options must be a dict or CloudConfigOptions, got {type(options).__name__}"],
            )
        options.ensure_valid()
        self._apply_log_level(options.level)

        config = await self.read_config(options)
        self._state = Loaded(config)
        return deepcopy(config)

    def instance(self) -> dict[str, Any]:
        """Return a copy of the last successfully loaded configuration.

        Raises:
            NotLoadedError: If ``load`` has not completed successfully yet.
        """
        if isinstance(self._state, Loaded):
            return deepcopy(self._state.config)
        raise NotLoadedError()

    @staticmethod
    def _apply_log_level(level: Optional[str]) -> None:
        try:
            logging.getLogger(PACKAGE_LOGGER).setLevel((level or "info").upper())
        except ValueError as e:
            raise InvalidOptionsError("Invalid options supplied", [f"level: {e}"]) from e

    async def read_config(self, options: CloudConfigOptions) -> dict[str, Any]:
        """Read every configuration source and merge them by precedence."""
        bootstrap_config = await self.read_bootstrap_config(options)
        logger.debug(f"Using bootstrap config: {mask_secrets(bootstrap_config)}")

        application_config = await self.read_application_config(
            options.config_path, options.active_profiles, options.file_extension
        )
        logger.debug(f"Using application config: {mask_secrets(application_config)}")

        # Application config may override the application name used remotely
        app_name = get_property(application_config, APP_NAME_KEY)
        if app_name:
            bootstrap_config["spring"]["cloud"]["config"]["name"] = app_name

        cloud_config = await self.read_cloud_config(bootstrap_config)

        if options.precedence == Precedence.REMOTE_HIGHEST:
            layers = [application_config, bootstrap_config, cloud_config]
        else:
            layers = [application_config, cloud_config, bootstrap_config]

        config = merge_properties(layers)
        logger.debug(f"Using config: {mask_secrets(config)}")
        return config

    async def read_bootstrap_config(self, options: CloudConfigOptions) -> dict[str, Any]:
        """Read ``bootstrap.yml`` and overlay environment overrides.

        The active profiles are recorded under ``spring.cloud.config.profiles``
        for the remote fetch.
        """
        path = Path(options.resolved_bootstrap_path) / f"bootstrap.{options.file_extension}"
        bootstrap_file = await aread_yaml_as_document(path, options.active_profiles)

        bootstrap_config = merge_properties([
            bootstrap_file,
            get_application_json_from_env(),
            get_predefined_env_properties(),
        ])
        validate_bootstrap_config(bootstrap_config)

        bootstrap_config["spring"]["cloud"]["config"]["profiles"] = list(options.active_profiles)
        return bootstrap_config

    async def read_application_config(
        self,
        config_path: str,
        active_profiles: list[str],
        file_extension: str = "yml",
    ) -> dict[str, Any]:
        """Read ``application.yml`` and merge in profile-specific overlays.

        Overlays are applied in the order the profiles are given, so later
        profiles win. Missing or unreadable overlays are skipped.
        """
        base_dir = Path(config_path)
        app_configs = [
            await aread_yaml_as_document(
                base_dir / f"application.{file_extension}", active_profiles
            )
        ]

        for profile in active_profiles:
            profile_file = base_dir / f"application-{profile}.{file_extension}"
            if not profile_file.is_file():
                logger.debug(f"Profile-specific config not found: {profile_file.name}")
                continue
            try:
                app_configs.append(await aread_profile_document(profile_file))
            except ConfigReadError as e:
                logger.error(f"Error reading profile-specific config: {e}")

        return merge_properties(app_configs)

    async def read_cloud_config(self, bootstrap_config: dict[str, Any]) -> dict[str, Any]:
        """Read the remote configuration described by the bootstrap config."""
        return await self.service.get_config_from_server(bootstrap_config)
