"""Gateway between the resolution engine and the remote config client."""

import logging
from typing import Any

from .config import ConfigClientOptions
from .interfaces import ConfigServerClient
from .utils import parse_properties_to_objects

logger = logging.getLogger(__name__)


class SpringCloudConfigGateway:
    """Fetches remote properties and expands them into a nested config."""

    def __init__(self, client: ConfigServerClient):
        self.client = client

    async def get_config_from_server(self, options: ConfigClientOptions) -> dict[str, Any]:
        """Get the external configuration from the config server.

        Returns:
            Nested config built from the server's dotted keys; ``{}`` when the
            server returned nothing.
        """
        pairs = await self.client.fetch(options)
        if not pairs:
            return {}

        flat = {key: value for key, value in pairs}
        return parse_properties_to_objects(flat)
