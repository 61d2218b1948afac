"""Place-name resolution using OpenStreetMap Nominatim.

Every outbound Nominatim request goes through one process-wide rate
limiter, and resolved places are memoized in the GeoCache keyed by the
exact text that was looked up.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

import requests

from domain.errors import UpstreamRateLimited, UpstreamTimeout, UpstreamUnavailable
from domain.models import BoundingBox, GeoResult
from services.rate_limiter import RateLimiter
from services.search_cache import GeoCache, get_default_geo_cache
from settings import settings

logger = logging.getLogger(__name__)

NOMINATIM_BASE_URL = settings.NOMINATIM_BASE_URL
PROXY_ENDPOINTS = ("search", "reverse", "lookup")

# Place classifications preferred over higher-importance points of interest
ADMIN_PLACE_TYPES = frozenset(
    {"administrative", "state", "city", "town", "village", "county", "district"}
)
IMPORTANCE_THRESHOLD = 0.5

_session = requests.Session()
_limiter = RateLimiter(settings.NOMINATIM_MIN_INTERVAL)
_logged_ua = False

FALLBACK_UA = "sightline/0.1 (contact: example@example.com)"
if settings.NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


_ua_value = settings.NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
    "Accept": "application/json",
}
if settings.NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = settings.NOMINATIM_REFERER


def _parse_candidate(item: Dict[str, Any]) -> Optional[GeoResult]:
    """Convert one Nominatim search hit into a GeoResult, or None if malformed."""
    try:
        south, north, west, east = (float(v) for v in item["boundingbox"])
        lat = float(item["lat"])
        lon = float(item["lon"])
    except (KeyError, TypeError, ValueError) as exc:
        logger.debug("Skipping malformed Nominatim candidate %s: %s", item.get("place_id"), exc)
        return None

    address = item.get("address") or {}
    components = {
        "country": address.get("country"),
        "state": address.get("state"),
        "city": address.get("city") or address.get("town") or address.get("village"),
    }
    osm_id = item.get("osm_id")
    return GeoResult(
        display_name=item.get("display_name", ""),
        lat=lat,
        lon=lon,
        bounding_box=BoundingBox(south, north, west, east),
        type=item.get("type", ""),
        importance=float(item.get("importance") or 0.0),
        osm_type=item.get("osm_type"),
        osm_id=int(osm_id) if osm_id is not None else None,
        address_components={k: v for k, v in components.items() if v},
    )


def select_candidate(candidates: Iterable[GeoResult]) -> Optional[GeoResult]:
    """
    Pick the best candidate from the geocoder's ranked list.

    The first administrative-ish place (or any place with importance above
    0.5) wins; otherwise the most important candidate is used.
    """
    ranked = list(candidates)
    if not ranked:
        return None
    for candidate in ranked:
        if candidate.type in ADMIN_PLACE_TYPES or candidate.importance > IMPORTANCE_THRESHOLD:
            return candidate
    return max(ranked, key=lambda c: c.importance)


class LocationResolver:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        limiter: Optional[RateLimiter] = None,
        cache: Optional[GeoCache] = None,
        timeout: Optional[float] = None,
        result_limit: Optional[int] = None,
    ):
        self.base_url = (base_url or NOMINATIM_BASE_URL).rstrip("/")
        self.session = session or _session
        self.limiter = limiter or _limiter
        self.cache = cache or get_default_geo_cache()
        self.timeout = timeout if timeout is not None else settings.NOMINATIM_TIMEOUT
        self.result_limit = result_limit or settings.NOMINATIM_RESULT_LIMIT

    def _throttled_get(self, path: str, params: Dict[str, Any]) -> Any:
        """GET a Nominatim endpoint under the shared rate limit and decode JSON."""
        global _logged_ua
        if not _logged_ua:
            logger.debug("Nominatim User-Agent: %s", _redact_email(_ua_value))
            _logged_ua = True

        url = f"{self.base_url}/{path}"
        self.limiter.acquire()
        try:
            resp = self.session.get(url, params=params, headers=NOMINATIM_HEADERS, timeout=self.timeout)
        except requests.Timeout as exc:
            raise UpstreamTimeout(f"Nominatim request timed out: {exc}", endpoint=url) from exc
        except requests.RequestException as exc:
            raise UpstreamUnavailable(f"Nominatim request failed: {exc}", endpoint=url) from exc

        if resp.status_code == 429:
            raise UpstreamRateLimited("Rate limited by Nominatim", endpoint=url)
        if not resp.ok:
            raise UpstreamUnavailable(f"Nominatim request failed: {resp.status_code}", endpoint=url)
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamUnavailable(f"Nominatim returned invalid JSON: {exc}", endpoint=url) from exc

    def geocode(self, query: str, country_code: Optional[str] = None) -> List[GeoResult]:
        """Return the geocoder's ranked candidates for *query*."""
        params: Dict[str, Any] = {
            "q": query,
            "format": "json",
            "addressdetails": "1",
            "limit": str(self.result_limit),
        }
        if country_code:
            params["countrycodes"] = country_code

        data = self._throttled_get("search", params) or []
        results = [r for r in (_parse_candidate(item) for item in data) if r is not None]
        logger.debug("Nominatim search %r -> %d candidates", query, len(results))
        return results

    def resolve(self, query: str, country_code: Optional[str] = None) -> Optional[GeoResult]:
        """
        Resolve *query* to a single place.

        Returns None when the geocoder has no usable candidate. Only
        resolved places are cached.
        """
        # A country restriction can change the answer for the same text
        cache_key = f"{query}|{country_code}" if country_code else query
        cached = self.cache.get_geo_result(cache_key)
        if cached is not None:
            return cached

        best = select_candidate(self.geocode(query, country_code))
        if best is None:
            logger.info("No geocoding candidates for %r", query)
            return None

        self.cache.put_geo_result(cache_key, best)
        return best

    def proxy(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """Forward a raw Nominatim request (search/reverse/lookup) under the shared limit."""
        if endpoint not in PROXY_ENDPOINTS:
            raise ValueError(f"Unsupported Nominatim endpoint: {endpoint}")
        forwarded = dict(params)
        forwarded.setdefault("format", "json")
        return self._throttled_get(endpoint, forwarded)


_default_location_resolver: Optional[LocationResolver] = None


def get_default_location_resolver() -> LocationResolver:
    global _default_location_resolver
    if _default_location_resolver is None:
        _default_location_resolver = LocationResolver()
    return _default_location_resolver
