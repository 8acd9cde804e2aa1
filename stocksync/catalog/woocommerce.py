"""WooCommerce REST API client."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from stocksync.config import CatalogSettings
from stocksync.errors import CatalogError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Catalog request failed"


class WooCommerceClient:
    def __init__(
        self,
        api_url: str,
        *,
        key: str | None = None,
        secret: str | None = None,
        timeout: float = 30.0,
        session: httpx.AsyncClient | None = None,
        max_requests_per_second: float | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        auth = (key, secret) if key and secret else None
        self._session = session or httpx.AsyncClient(timeout=timeout, headers={"User-Agent": "StockSync/1.0"})
        self._auth = auth
        self._min_interval = 1.0 / max_requests_per_second if max_requests_per_second else 0.0
        self._last_request: float | None = None

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> WooCommerceClient:
        return cls(
            settings.api_url,
            key=settings.key,
            secret=settings.secret,
            timeout=settings.timeout,
            max_requests_per_second=settings.max_requests_per_second,
        )

    async def close(self) -> None:
        await self._session.aclose()

    async def find_products(self, sku: str) -> list[dict[str, Any]]:
        data = await self._request("GET", "/products", params={"sku": sku})
        if not isinstance(data, list):
            raise CatalogError(f"Unexpected product search response for {sku}", detail=data)
        return data

    async def update_variation(self, parent_id: Any, variation_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/products/{parent_id}/variations/{variation_id}", json=payload)

    async def _wait_turn(self) -> None:
        """Keep at least `_min_interval` seconds between consecutive calls."""
        if self._min_interval and self._last_request is not None:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
        self._last_request = time.monotonic()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        await self._wait_turn()
        url = f"{self.api_url}{path}"
        try:
            response = await self._session.request(method, url, auth=self._auth or httpx.USE_CLIENT_DEFAULT, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise CatalogError(
                f"{method} {path} returned {exc.response.status_code}", detail=_error_body(exc.response)
            ) from exc
        except httpx.HTTPError as exc:
            raise CatalogError(f"{method} {path} failed", detail=str(exc) or GENERIC_ERROR) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogError(f"{method} {path} returned invalid JSON", detail=response.text or GENERIC_ERROR) from exc


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or GENERIC_ERROR
