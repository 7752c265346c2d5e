"""Interfaces for external collaborators.

The resolution engine only depends on these contracts; concrete
implementations live in :mod:`cloudconfig.clients`.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from .config import ConfigClientOptions

# A flat (dotted-key, value) pair as returned by a config server
PropertyPair = tuple[str, Any]


class ConfigServerClient(ABC):
    """Client for a remote configuration server.

    Implementations fetch the properties for the application described by
    ``options`` and return them flat, in priority order resolved (each key
    appears once). Returning ``None`` or an empty iterable means the server
    has no properties for this application.
    """

    @abstractmethod
    async def fetch(self, options: ConfigClientOptions) -> Optional[Iterable[PropertyPair]]:
        """Fetch flat properties from the server.

        Raises:
            Exception: Any failure; the caller decides whether it is fatal.
        """
        pass

    async def close(self) -> None:
        """Release resources held by the client."""
        return None
