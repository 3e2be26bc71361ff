"""HTTP fetcher for component source text.

Requests ``GET <root>/<identifier>[?variant=<variant>]`` with a hard
per-attempt timeout and a fixed-delay retry policy.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..entities.config import LoaderConfig
from ..entities.models import ComponentSourceResponse
from ....core.exceptions import ComponentFetchError, ComponentSourceError

logger = logging.getLogger(__name__)

USER_AGENT = "block-loader/0.1.0"


class HttpComponentFetcher:
    """Fetch component source from the component endpoint.

    Transport failures (connection errors, error status codes, timeouts) are
    retried up to ``config.retry_attempts`` total attempts with
    ``config.retry_delay`` seconds between them. A reachable endpoint that
    reports failure or sends no source text is not retried.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
        config: Optional[LoaderConfig] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.config = config or LoaderConfig()
        self._headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            **(headers or {}),
        }
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpComponentFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def build_url(self, identifier: str) -> str:
        return f"{self.base_url}/{quote(identifier, safe='')}"

    async def fetch(
        self,
        identifier: str,
        variant: Optional[str] = None,
        config: Optional[LoaderConfig] = None,
    ) -> ComponentSourceResponse:
        """Fetch the source of ``identifier``.

        Raises:
            ComponentSourceError: the endpoint answered without usable source
            ComponentFetchError: every attempt failed at the transport level
        """
        config = config or self.config
        attempts = config.retry_attempts
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            try:
                response = await self._request(identifier, variant, config.timeout)
            except (httpx.HTTPError, asyncio.TimeoutError) as e:
                last_error = e
                if attempt < attempts:
                    logger.warning(
                        f"Attempt {attempt}/{attempts} failed for {identifier}: "
                        f"{_describe(e, config.timeout)}, retrying in {config.retry_delay}s"
                    )
                    await self._sleep(config.retry_delay)
                continue

            return self._parse(response, identifier)

        raise ComponentFetchError(
            f"Failed to fetch {identifier} after {attempts} attempt(s): "
            f"{_describe(last_error, config.timeout)}",
            identifier=identifier,
            attempts=attempts,
        ) from last_error

    async def _request(self, identifier: str, variant: Optional[str], timeout: float) -> httpx.Response:
        params = {"variant": variant} if variant else None

        # wait_for cancels the in-flight request when the deadline passes
        response = await asyncio.wait_for(
            self.client.get(
                self.build_url(identifier),
                params=params,
                headers=self._headers,
                timeout=timeout,
            ),
            timeout=timeout,
        )
        response.raise_for_status()
        return response

    def _parse(self, response: httpx.Response, identifier: str) -> ComponentSourceResponse:
        try:
            payload = response.json()
            data = ComponentSourceResponse.model_validate(payload)
        except (json.JSONDecodeError, ValueError, ValidationError) as e:
            raise ComponentSourceError(
                f"Malformed response for {identifier}: {e}",
                identifier=identifier,
            ) from e

        if not data.success:
            raise ComponentSourceError(
                data.error or f"Failed to load component {identifier}",
                identifier=identifier,
            )

        if not data.source_text or not data.source_text.strip():
            raise ComponentSourceError(
                f"No component source received for {identifier}",
                identifier=identifier,
            )

        return data

    async def invalidate(
        self,
        identifier: str,
        config: Optional[LoaderConfig] = None,
    ) -> Dict[str, Any]:
        """Ask the endpoint to drop its cached copy of ``identifier``.

        ``"all"`` clears every server-side entry. The local cache is not
        touched; callers clear it separately. A single attempt is made,
        bounded by ``config.timeout``.
        """
        timeout = (config or self.config).timeout
        try:
            response = await asyncio.wait_for(
                self.client.delete(self.build_url(identifier), headers=self._headers),
                timeout=timeout,
            )
            response.raise_for_status()
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            raise ComponentFetchError(
                f"Failed to invalidate {identifier}: {_describe(e, timeout)}",
                identifier=identifier,
                attempts=1,
            ) from e

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            return {"success": True, "raw_response": response.text}


def _describe(error: Optional[BaseException], timeout: float) -> str:
    if error is None:
        return "unknown error"
    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
        return f"request timed out after {timeout}s"
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}: {error.response.reason_phrase}"
    return str(error) or type(error).__name__
