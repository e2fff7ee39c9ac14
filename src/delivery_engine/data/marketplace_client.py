"""HTTP client for the marketplace API (vendor profiles, platform radius, orders)."""

from __future__ import annotations

import logging
import math
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

import httpx

from ..config import settings
from ..models.domain import GeoPoint, Product, Vendor

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> float | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _decimal(value: Any, field_name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid decimal for '{field_name}': {value!r}") from exc


def _optional_decimal(value: Any, field_name: str) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _decimal(value, field_name)


def _point(latitude: Any, longitude: Any) -> GeoPoint | None:
    lat, lon = _optional_float(latitude), _optional_float(longitude)
    if lat is None or lon is None:
        return None
    return GeoPoint(latitude=lat, longitude=lon)


def vendor_from_payload(row: Mapping[str, Any]) -> Vendor:
    """Build a Vendor from a ``vendor-profiles`` record."""

    if row.get("id") is None:
        raise ValueError("Vendor payload is missing 'id'.")
    return Vendor(
        id=str(row["id"]),
        location=_point(row.get("latitude"), row.get("longitude")),
        delivery_radius_km=_optional_float(row.get("delivery_radius")),
        # Only an explicit false marks a vendor offline.
        is_online=row.get("is_online", True) is not False,
        name=row.get("business_name"),
    )


def _listing_radius(row: Mapping[str, Any]) -> float | None:
    nested = row.get("vendor") if isinstance(row.get("vendor"), Mapping) else {}
    for candidate in (row.get("delivery_radius"), nested.get("delivery_radius"), row.get("vendor_delivery_radius")):
        radius = _optional_float(candidate)
        if radius is not None:
            return radius
    return None


def product_from_payload(row: Mapping[str, Any]) -> Product:
    """Build a Product from a search/listing record."""

    if row.get("id") is None:
        raise ValueError("Product payload is missing 'id'.")
    vendor_id = row.get("vendor_id")
    if vendor_id is None and isinstance(row.get("vendor"), Mapping):
        vendor_id = row["vendor"].get("id")
    if vendor_id is None:
        raise ValueError(f"Product '{row['id']}' payload is missing a vendor id.")
    return Product(
        id=str(row["id"]),
        vendor_id=str(vendor_id),
        price=_decimal(row.get("price"), "price"),
        stock_quantity=int(row.get("quantity") or 0),
        free_delivery=bool(row.get("free_delivery", False)),
        custom_delivery_fee_enabled=bool(row.get("custom_delivery_fee_enabled", False)),
        custom_delivery_fee=_optional_decimal(row.get("custom_delivery_fee"), "custom_delivery_fee"),
        name=row.get("name"),
    )


def listing_vendor_from_payload(row: Mapping[str, Any]) -> Vendor:
    """Vendor fields embedded in a search/listing record."""

    product = product_from_payload(row)
    return Vendor(
        id=product.vendor_id,
        location=_point(row.get("vendor_latitude"), row.get("vendor_longitude")),
        delivery_radius_km=_listing_radius(row),
        is_online=row.get("vendor_online", True) is not False,
        name=row.get("vendor_name"),
    )


def parse_listing_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[list[Product], dict[str, Vendor]]:
    """Parse listing rows, skipping malformed ones."""

    products: list[Product] = []
    vendors: dict[str, Vendor] = {}
    for row in rows:
        try:
            product = product_from_payload(row)
            vendor = listing_vendor_from_payload(row)
        except (KeyError, ValueError, TypeError) as e:
            logging.warning(f"Skipping invalid listing row: {e}")
            continue
        products.append(product)
        vendors.setdefault(vendor.id, vendor)
    return products, vendors


class MarketplaceClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        cache_ttl_seconds: float | None = None,
        cache_max_entries: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.marketplace_api_base_url
        if not self.base_url:
            raise ValueError("Marketplace API base URL is not configured.")
        self.token = token if token is not None else settings.marketplace_api_token
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.api_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.api_backoff_seconds
        self.cache_ttl_seconds = (
            cache_ttl_seconds if cache_ttl_seconds is not None else settings.vendor_cache_ttl_seconds
        )
        self.cache_max_entries = (
            cache_max_entries if cache_max_entries is not None else settings.vendor_cache_max_entries
        )
        self._transport = transport
        self._vendor_cache: dict[str, tuple[float, Vendor]] = {}
        self._radius_cache: tuple[float, float | None] | None = None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Token {self.token}"
        return headers

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            headers=self._headers(),
            transport=self._transport,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying transient failures; 4xx responses are returned as-is.

        Raises ConnectionError once retries are exhausted on timeouts, network
        errors or 5xx responses.
        """

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.request(method, path, **kwargs)
                    if response.status_code >= 500:
                        response.raise_for_status()
                    return response
                except httpx.HTTPStatusError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Marketplace API {method} {path} still failing after {self.max_retries} retries: {e}")
                        raise ConnectionError(
                            f"Marketplace API at {self.base_url} is unavailable "
                            f"(HTTP {e.response.status_code} from {path})"
                        ) from e
                    logger.debug(f"Marketplace API {method} {path} failed, retrying (attempt {attempt}/{self.max_retries})")
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Marketplace API unreachable after {self.max_retries} retries: {e}")
                        raise ConnectionError(f"Failed to reach marketplace API at {self.base_url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Marketplace API network error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    @staticmethod
    def _json(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as exc:
            raise ValueError(f"Marketplace API returned a non-JSON body for {response.request.url}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Marketplace API returned unexpected JSON for {response.request.url}")
        return data

    def fetch_global_delivery_radius(self) -> float | None:
        """Platform-wide radius configured by the marketplace admin, if any.

        Unusable responses yield None, i.e. no platform default.
        """

        now = time.monotonic()
        if self._radius_cache and now - self._radius_cache[0] < self.cache_ttl_seconds:
            return self._radius_cache[1]

        response = self._request("GET", "delivery-radius/")
        if response.status_code != 200:
            logger.warning(f"Failed to fetch delivery radius (HTTP {response.status_code})")
            return None
        try:
            radius = _optional_float(self._json(response).get("delivery_radius"))
        except ValueError as e:
            logger.warning(f"Ignoring delivery radius response: {e}")
            return None
        self._radius_cache = (now, radius)
        return radius

    def _prune_cache(self, now: float) -> None:
        expired = [key for key, (fetched_at, _) in self._vendor_cache.items() if now - fetched_at >= self.cache_ttl_seconds]
        for key in expired:
            del self._vendor_cache[key]
        # Entries are kept in insertion order; drop the oldest past the cap.
        while len(self._vendor_cache) > self.cache_max_entries:
            del self._vendor_cache[next(iter(self._vendor_cache))]

    def fetch_vendor(self, vendor_id: str) -> Vendor | None:
        now = time.monotonic()
        self._prune_cache(now)
        cached = self._vendor_cache.get(vendor_id)
        if cached:
            return cached[1]

        response = self._request("GET", f"vendor-profiles/{vendor_id}/")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            logger.warning(f"Failed to fetch vendor profile {vendor_id} (HTTP {response.status_code})")
            return None
        vendor = vendor_from_payload(self._json(response))
        self._vendor_cache[vendor_id] = (time.monotonic(), vendor)
        self._prune_cache(now)
        return vendor

    def fetch_vendors(self, vendor_ids: Iterable[str]) -> dict[str, Vendor]:
        vendors: dict[str, Vendor] = {}
        for vendor_id in dict.fromkeys(vendor_ids):
            vendor = self.fetch_vendor(vendor_id)
            if vendor is not None:
                vendors[vendor_id] = vendor
        return vendors

    def clear_cache(self) -> None:
        self._vendor_cache.clear()
        self._radius_cache = None

    def create_order(self, payload: dict) -> dict:
        response = self._request("POST", "api/orders/create/", json=payload)
        if response.status_code >= 400:
            try:
                message = self._json(response).get("message")
            except ValueError:
                message = None
            raise ValueError(message or f"Failed to create order (HTTP {response.status_code})")
        return self._json(response)
