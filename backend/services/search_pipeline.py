"""
Search pipeline: raw query text -> SearchResult.

Stages run strictly in order:
1. Parse and validate the text (no network)
2. Look up the search cache by the canonical filter fields
3. Resolve the place name (rate-limited, own cache)
4. Compute the bounding box / area id
5. Build and execute the Overpass query with endpoint failover
6. Normalize, aggregate stats and cache the finished result

The pipeline is all-or-nothing: any failure raises a SightlineError and
nothing is cached for that request.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from domain.errors import (
    InsufficientFilters,
    InvalidQuery,
    LocationNotFound,
    MissingLocation,
    MissingQuery,
    QueryTooLong,
)
from domain.models import BoundingBox, GeoResult, ParsedQuery, SearchResult
from services.geocoding import LocationResolver, get_default_location_resolver
from services.geometry import bounding_box, osm_id_to_area_id
from services.normalizer import calculate_stats
from services.overpass_client import OverpassExecutor, get_default_overpass_executor
from services.overpass_query import build_operator_query, build_overpass_query
from services.query_parser import parse_query, validate_query
from services.search_cache import SearchCache, get_default_search_cache
from settings import settings

logger = logging.getLogger(__name__)

_COUNTRY_CODE_RE = re.compile(r"^[A-Za-z]{2}$")


def country_code_for(parsed: ParsedQuery) -> Optional[str]:
    """
    Geocoder country restriction for a query scoped by region or near.

    Only ISO 3166-1 alpha-2 codes are passed through; a country given by
    name is geocoded on its own when it is the only scope.
    """
    if not parsed.country or parsed.location_query == parsed.country:
        return None
    if _COUNTRY_CODE_RE.match(parsed.country):
        return parsed.country.lower()
    return None


class SearchService:
    def __init__(
        self,
        resolver: Optional[LocationResolver] = None,
        executor: Optional[OverpassExecutor] = None,
        cache: Optional[SearchCache] = None,
        max_query_length: Optional[int] = None,
        cache_enabled: Optional[bool] = None,
    ):
        self.resolver = resolver or get_default_location_resolver()
        self.executor = executor or get_default_overpass_executor()
        self.cache = cache or get_default_search_cache()
        self.max_query_length = max_query_length or settings.MAX_QUERY_LENGTH
        self.cache_enabled = settings.SEARCH_CACHE_ENABLED if cache_enabled is None else cache_enabled

    def parse(self, text: object) -> ParsedQuery:
        """Parse and validate; raises before any network I/O."""
        if not text or not isinstance(text, str):
            raise MissingQuery()
        if len(text) > self.max_query_length:
            raise QueryTooLong(len(text), self.max_query_length)

        parsed = parse_query(text)
        validation = validate_query(parsed)
        if not validation.valid:
            raise InvalidQuery(validation.error or "Invalid query")
        return parsed

    def _resolve(self, parsed: ParsedQuery) -> GeoResult:
        location = parsed.location_query
        if not location:
            raise MissingLocation()
        geo = self.resolver.resolve(location, country_code_for(parsed))
        if geo is None:
            raise LocationNotFound(location)
        return geo

    def _build_query(self, parsed: ParsedQuery, bbox: BoundingBox, area_id: Optional[int]) -> str:
        if parsed.type:
            return build_overpass_query(parsed.type, bbox, parsed.operator, area_id)
        if parsed.operator:
            return build_operator_query(bbox, parsed.operator, area_id)
        raise InsufficientFilters()

    def search_parsed(self, parsed: ParsedQuery) -> SearchResult:
        if self.cache_enabled:
            cached = self.cache.get_search_result(parsed)
            if cached is not None:
                return cached

        geo = self._resolve(parsed)

        # A radius search is a box around the point; region/country searches
        # use the place's own extent and, when possible, its boundary area.
        area_id: Optional[int] = None
        if parsed.near:
            bbox = bounding_box(geo.lat, geo.lon, parsed.radius)
        else:
            bbox = geo.bounding_box
            area_id = osm_id_to_area_id(geo.osm_type, geo.osm_id)

        query = self._build_query(parsed, bbox, area_id)
        assets = self.executor.execute(query)

        result = SearchResult(
            results=assets,
            stats=calculate_stats(assets),
            bounds=bbox,
            query=parsed,
        )
        logger.info(
            "Search type=%s operator=%s location=%r area=%s -> %d assets",
            parsed.type,
            parsed.operator,
            parsed.location_query,
            area_id,
            result.stats.total,
        )
        if self.cache_enabled:
            self.cache.put_search_result(parsed, result)
        return result

    def search(self, text: object) -> SearchResult:
        return self.search_parsed(self.parse(text))


_default_search_service: Optional[SearchService] = None


def get_default_search_service() -> SearchService:
    global _default_search_service
    if _default_search_service is None:
        _default_search_service = SearchService()
    return _default_search_service
