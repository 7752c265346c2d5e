"""Dependency container wiring the resolution components together."""

import logging
from typing import Optional

from .clients.http import HttpConfigServerClient
from .gateway import SpringCloudConfigGateway
from .interfaces import ConfigServerClient
from .loader import SpringCloudConfig
from .service import SpringCloudConfigService

logger = logging.getLogger(__name__)


class Container:
    """Builds and owns the client, gateway, service and loader.

    Components are created once per container. Pass a custom ``client`` to
    talk to something other than an HTTP config server (or a fake in tests).

    Usage:
        async with Container() as container:
            settings = await container.config.load(options)
    """

    def __init__(self, client: Optional[ConfigServerClient] = None, sleep=None):
        self._client = client
        self._sleep = sleep
        self._config: Optional[SpringCloudConfig] = None

    def initialize(self) -> None:
        """Create the components. Safe to call more than once."""
        if self._config is not None:
            return

        if self._client is None:
            self._client = HttpConfigServerClient()
        gateway = SpringCloudConfigGateway(self._client)
        service = SpringCloudConfigService(gateway, sleep=self._sleep)
        self._config = SpringCloudConfig(service)
        logger.debug(f"Container initialized with {type(self._client).__name__}")

    async def shutdown(self) -> None:
        """Release the client's resources."""
        if self._client is not None:
            await self._client.close()

    @property
    def client(self) -> ConfigServerClient:
        self.initialize()
        return self._client

    @property
    def config(self) -> SpringCloudConfig:
        """Get the configuration loader, creating components on first use."""
        self.initialize()
        return self._config

    async def __aenter__(self):
        self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.shutdown()
