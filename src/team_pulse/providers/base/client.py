from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .cache import ResponseCache, make_cache_key
from .errors import ProviderRequestError

logger = logging.getLogger(__name__)

Json = dict[str, Any]


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic async HTTP client wrapper.

    - Uses a single underlying httpx.AsyncClient for connection pooling.
    - Provides consistent error handling (everything becomes ProviderRequestError).
    - Optionally serves recent bodies from a ResponseCache (per-call max age).
    - Provider-specific clients wrap this and add endpoint methods / auth headers.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)
    cache: ResponseCache | None = None

    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> BaseHttpClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Json:
        """
        Perform an HTTP request and return parsed JSON (dict).
        Raises ProviderRequestError on transport issues / non-2xx / invalid JSON.
        """
        try:
            resp = await self._client.request(
                method=method,
                url=path.lstrip("/"),
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise ProviderRequestError(f"{method} {path} failed: {e}") from e

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderRequestError(
                f"HTTP {resp.status_code} for {method} {resp.request.url}"
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderRequestError("Response was not valid JSON.") from e

        if not isinstance(data, dict):
            raise ProviderRequestError(f"Expected JSON object, got {type(data)}")

        return data

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        max_age_s: float = 0.0,
    ) -> Json:
        # One cache is shared by every provider client.
        key = make_cache_key(self.base_url.rstrip("/") + path, params)
        if self.cache is not None and max_age_s > 0:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("cache hit %s", key)
                return cached

        data = await self.request_json("GET", path, params=params, headers=headers)

        if self.cache is not None:
            self.cache.set(key, data, max_age_s=max_age_s)
        return data
