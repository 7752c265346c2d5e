"""Remote configuration service: fail-fast and retry policy."""

import logging
from typing import Any

from .config import ConfigClientOptions
from .errors import ConfigError, RemoteFetchError
from .gateway import SpringCloudConfigGateway
from .retry import RetryState, retry_with_state
from .utils import mask_secrets

logger = logging.getLogger(__name__)


class SpringCloudConfigService:
    """Reads the remote configuration, retrying when the policy asks for it.

    Policy:
        - remote fetching disabled: ``{}``
        - fetch fails, fail-fast off: warning, ``{}``
        - fetch fails, fail-fast on, retry off: the error propagates
        - fetch fails, fail-fast on, retry on: retried with backoff until
          success or RetryExhaustedError
    """

    def __init__(self, gateway: SpringCloudConfigGateway, sleep=None):
        self.gateway = gateway
        self._sleep = sleep

    async def get_config_from_server(self, bootstrap_config: dict) -> dict[str, Any]:
        """Read the remote configuration described by a bootstrap config."""
        options = ConfigClientOptions.from_bootstrap(bootstrap_config)
        if not options.enabled:
            logger.debug("Remote configuration disabled, skipping")
            return {}

        logger.debug(
            f"Remote config options: {mask_secrets(options.model_dump(by_alias=True))}"
        )

        try:
            cloud_config = await self.gateway.get_config_from_server(options)
        except Exception as e:
            logger.warning(f"Error reading remote config: {e}")
            if not options.fail_fast:
                return {}
            if options.retry is None or not options.retry.enabled:
                if isinstance(e, ConfigError):
                    raise
                raise RemoteFetchError(f"Error reading remote config: {e}") from e

            retry_state = RetryState(options.retry)
            kwargs = {"sleep": self._sleep} if self._sleep else {}
            cloud_config = await retry_with_state(
                lambda: self.gateway.get_config_from_server(options),
                retry_state,
                **kwargs,
            )

        logger.debug(f"Remote config: {cloud_config}")
        return cloud_config
