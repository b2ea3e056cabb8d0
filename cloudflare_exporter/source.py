import logging
from typing import List, Optional, Protocol

import httpx

from cloudflare_exporter.config import Settings
from cloudflare_exporter.errors import NotFound, SourceUnavailable
from cloudflare_exporter.model import Zone, ZoneTotals

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class StatsSource(Protocol):
    def list_zones(self) -> List[Zone]: ...

    def fetch_zone_totals(self, zone_id: str) -> ZoneTotals: ...


class CloudflareClient:
    """Stats source backed by the Cloudflare v4 REST API.

    The underlying ``httpx.Client`` is shared by all per-zone workers of a scrape.
    """

    def __init__(
        self,
        api_url: str,
        headers: Optional[dict] = None,
        window_minutes: int = 1440,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.window_minutes = window_minutes
        self._http = httpx.Client(
            base_url=api_url,
            headers=headers or {},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudflareClient":
        if not settings.auth_headers():
            logger.warning("no Cloudflare credentials configured, API calls will be rejected")
        return cls(
            settings.api_url,
            headers=settings.auth_headers(),
            window_minutes=settings.window_minutes,
            timeout=settings.http_timeout,
        )

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: Optional[dict] = None, zone_id: Optional[str] = None) -> dict:
        try:
            resp = self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"GET {path} failed: {e}", zone_id) from e
        if resp.status_code == 404:
            raise NotFound(f"GET {path} returned HTTP 404", zone_id)
        if resp.is_error:
            raise SourceUnavailable(f"GET {path} returned HTTP {resp.status_code}", zone_id)
        try:
            body = resp.json()
        except ValueError as e:
            raise SourceUnavailable(f"GET {path} returned invalid JSON", zone_id) from e
        if not isinstance(body, dict) or not body.get("success"):
            errors = body.get("errors") if isinstance(body, dict) else None
            raise SourceUnavailable(f"GET {path} was not successful: {errors}", zone_id)
        return body

    def list_zones(self) -> List[Zone]:
        zones: List[Zone] = []
        page = 1
        while True:
            body = self._get("/zones", params={"page": page, "per_page": PAGE_SIZE})
            try:
                zones.extend(Zone.from_api(z) for z in body["result"])
                total_pages = int((body.get("result_info") or {}).get("total_pages", 1))
            except (KeyError, TypeError, ValueError) as e:
                raise SourceUnavailable(f"malformed zone list on page {page}: {e}") from e
            if page >= total_pages:
                break
            page += 1
        logger.debug("listed %d zones", len(zones))
        return zones

    def fetch_zone_totals(self, zone_id: str) -> ZoneTotals:
        body = self._get(
            f"/zones/{zone_id}/analytics/dashboard",
            params={"since": f"-{self.window_minutes}", "continuous": "true"},
            zone_id=zone_id,
        )
        try:
            return ZoneTotals.from_api(body["result"]["totals"])
        except (KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(f"malformed analytics totals: {e}", zone_id) from e
