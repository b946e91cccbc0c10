from __future__ import annotations

import logging
from typing import Any

import httpx

from redseal.schemas.location import COUNTRIES_WITH_REGIONS


log = logging.getLogger(__name__)

DEFAULT_REGION_LABEL = "Province/State"


class LocationDataClient:
    """Countries, regions and trades for form dropdowns."""

    def __init__(self, base_url: str, *, timeout: float | None = 10.0, transport: httpx.BaseTransport | None = None):
        self._client = httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport)
        self.countries: list[dict[str, Any]] = []
        self.regions: list[dict[str, Any]] = []
        self.error: str | None = None

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str, *, params: dict[str, str] | None = None) -> dict[str, Any]:
        r = self._client.get(path, params=params)
        r.raise_for_status()
        data = r.json()
        return data if isinstance(data, dict) else {}

    def fetch_countries(self) -> list[dict[str, Any]]:
        try:
            self.countries = list(self._get("/api/countries").get("countries") or [])
        except (httpx.HTTPError, ValueError) as e:
            log.warning("fetch countries failed: %s", type(e).__name__)
            self.error = "Failed to load countries"
        return self.countries

    def fetch_regions(self, country_code: str) -> list[dict[str, Any]]:
        if not country_code:
            self.regions = []
            return self.regions
        try:
            self.regions = list(self._get("/api/regions", params={"country_code": country_code}).get("regions") or [])
        except (httpx.HTTPError, ValueError) as e:
            log.warning("fetch regions failed country=%s: %s", country_code, type(e).__name__)
            self.error = "Failed to load regions"
            self.regions = []
        return self.regions

    def fetch_trades(self, *, grouped: bool = False) -> list[dict[str, Any]] | dict[str, list[dict[str, Any]]]:
        try:
            if grouped:
                return dict(self._get("/api/trades", params={"grouped": "true"}).get("tradesBySector") or {})
            return list(self._get("/api/trades").get("trades") or [])
        except (httpx.HTTPError, ValueError) as e:
            log.warning("fetch trades failed: %s", type(e).__name__)
            self.error = "Failed to load trades"
            return {} if grouped else []

    def region_label(self, country_code: str) -> str:
        country = next((c for c in self.countries if c.get("code") == country_code), None)
        return (country or {}).get("region_label") or DEFAULT_REGION_LABEL

    def has_regions(self, country_code: str) -> bool:
        return country_code in COUNTRIES_WITH_REGIONS

    def country_by_name(self, name: str) -> dict[str, Any] | None:
        return next((c for c in self.countries if c.get("name_en") == name), None)
