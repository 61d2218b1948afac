"""
Core domain models for the infrastructure search pipeline.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

DEFAULT_RADIUS_KM = 50
MIN_RADIUS_KM = 1
MAX_RADIUS_KM = 500


class BoundingBox(NamedTuple):
    """Geographic box in (south, north, west, east) order."""
    south: float
    north: float
    west: float
    east: float


@dataclass(frozen=True)
class ParsedQuery:
    """
    Canonical interpretation of a user query.

    Holds exactly the fields needed to decide geographic scope and the
    asset filter. `raw` is kept for diagnostics and sharing.
    """
    type: Optional[str] = None
    operator: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    near: Optional[str] = None
    radius: int = DEFAULT_RADIUS_KM
    raw: str = ""

    @property
    def location_query(self) -> Optional[str]:
        """The place text to geocode; `near` wins over `region` over `country`."""
        return self.near or self.region or self.country

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "operator": self.operator,
            "region": self.region,
            "country": self.country,
            "near": self.near,
            "radius": self.radius,
            "raw": self.raw,
        }


@dataclass(frozen=True)
class GeoResult:
    """A geocoder candidate for a place name."""
    display_name: str
    lat: float
    lon: float
    bounding_box: BoundingBox
    type: str
    importance: float  # 0.0-1.0 relevance from the geocoder
    osm_type: Optional[str] = None  # "node", "way" or "relation"
    osm_id: Optional[int] = None
    address_components: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "display_name": self.display_name,
            "lat": self.lat,
            "lon": self.lon,
            "bounding_box": list(self.bounding_box),
            "type": self.type,
            "importance": self.importance,
            "osm_type": self.osm_type,
            "osm_id": self.osm_id,
            "address_components": dict(self.address_components),
        }


@dataclass(frozen=True)
class Asset:
    """
    A normalized physical-world feature.

    Built once from a raw Overpass element and never mutated afterwards.
    """
    id: str  # "<kind>/<numeric id>"
    name: str
    type: str
    operator: Optional[str]
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "operator": self.operator,
            "lat": self.lat,
            "lon": self.lon,
            "tags": dict(self.tags),
        }


@dataclass(frozen=True)
class SearchStats:
    total: int
    operators: Dict[str, int]
    types: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "operators": dict(self.operators),
            "types": dict(self.types),
        }


@dataclass(frozen=True)
class SearchResult:
    """The externally visible unit of work for one search request."""
    results: List[Asset]
    stats: SearchStats
    bounds: Optional[BoundingBox]
    query: ParsedQuery

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire shape."""
        return {
            "results": [asset.to_dict() for asset in self.results],
            "stats": self.stats.to_dict(),
            "bounds": list(self.bounds) if self.bounds is not None else None,
            "query": self.query.to_dict(),
        }


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
