"""
HTTP Client for the Hosted Data Service.

Provides an async HTTP client bound to the service's REST interface.
Every request carries the access key both as `apikey` and as a bearer token.
"""

from typing import Any

import httpx

from micronotes import __version__
from micronotes.core.config import get_remote_config
from micronotes.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class RestClient:
    """
    HTTP client for the remote REST interface.

    Features:
    - Base URL, access key and timeout from configuration
    - Authentication headers on every request
    - Structured logging of requests/responses
    - Transport errors logged and re-raised

    Usage:
        client = RestClient()
        response = await client.request("GET", "/notes", params={"select": "*"})
        await client.close()
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the REST client.

        Args:
            base_url: REST base URL. If None, built from SUPABASE_URL and application.yaml.
            api_key: Access key. If None, read from SUPABASE_ANON_KEY.
            timeout: Request timeout in seconds. If None, read from application.yaml.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        if base_url is None or api_key is None:
            remote = get_remote_config()
            base_url = base_url or remote.rest_url
            api_key = api_key or remote.api_key
            if timeout is None:
                timeout = remote.timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else 30.0
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "X-Client-Info": f"micronotes/{__version__}",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the service.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: Path under the REST base URL (e.g., /notes)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()

        log_with_source(
            logger,
            "remote",
            "debug",
            "REST request",
            method=method,
            path=path,
        )

        try:
            response = await client.request(method, path, **kwargs)

            log_with_source(
                logger,
                "remote",
                "debug",
                "REST response",
                method=method,
                path=path,
                status_code=response.status_code,
            )

            return response

        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "remote",
                "error",
                "REST request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise
