"""HTTP client for Spring Cloud Config compatible servers."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..config import ConfigClientOptions
from ..errors import RemoteFetchError
from ..interfaces import ConfigServerClient, PropertyPair

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


class HttpConfigServerClient(ConfigServerClient):
    """Fetches properties over HTTP from a Spring Cloud Config server.

    Calls ``GET {endpoint}/{name}/{profiles}[/{label}]`` and flattens the
    returned ``propertySources``. Sources are listed highest priority first,
    so the first source defining a key wins.

    Usage:
        client = HttpConfigServerClient()
        pairs = await client.fetch(options)
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self._transport = transport

    @staticmethod
    def build_url(options: ConfigClientOptions) -> str:
        """Build the environment URL for the given options."""
        base = (options.endpoint or "").strip().rstrip("/")
        profiles = ",".join(options.profiles) or DEFAULT_PROFILE
        path = f"{quote(options.application_name, safe='')}/{quote(profiles, safe=',')}"
        if options.label:
            # Spring Cloud Config encodes "/" in labels as "(_)"
            path += "/" + quote(options.label.replace("/", "(_)"), safe="()")
        return f"{base}/{path}"

    def _create_client(self, options: ConfigClientOptions) -> httpx.AsyncClient:
        auth = None
        if options.auth is not None:
            auth = httpx.BasicAuth(options.auth.user, options.auth.password)
        return httpx.AsyncClient(
            timeout=httpx.Timeout(options.timeout_seconds),
            auth=auth,
            verify=options.reject_unauthorized,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )

    async def fetch(self, options: ConfigClientOptions) -> list[PropertyPair]:
        url = self.build_url(options)
        logger.debug(f"Fetching remote configuration from {url}")

        try:
            async with self._create_client(options) as client:
                response = await client.get(url)
        except httpx.RequestError as e:
            raise RemoteFetchError(f"Config server request failed: {e}") from e

        if response.status_code != 200:
            raise RemoteFetchError(
                f"Config server error ({response.status_code}) for {url}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteFetchError(f"Config server returned invalid JSON: {e}") from e

        return self.flatten_property_sources(data)

    @staticmethod
    def flatten_property_sources(data: Any) -> list[PropertyPair]:
        """Flatten a Spring environment response into unique (key, value) pairs.

        Earlier property sources take priority over later ones.
        """
        if not isinstance(data, dict):
            raise RemoteFetchError("Config server response must be a JSON object")

        properties: dict[str, Any] = {}
        for source in data.get("propertySources") or []:
            for key, value in (source.get("source") or {}).items():
                properties.setdefault(key, value)
        return list(properties.items())
