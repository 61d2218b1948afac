"""
Normalization of raw Overpass elements into Asset records, plus stats.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from domain.models import Asset, SearchStats
from settings import settings

logger = logging.getLogger(__name__)

UNNAMED = "Unnamed"
FALLBACK_TYPE = "infrastructure"
UNKNOWN_OPERATOR = "Unknown"

NAME_KEYS = ("name", "name:en", "ref", "description", "operator")

RELEVANT_TAG_KEYS = (
    "name",
    "operator",
    "power",
    "voltage",
    "capacity",
    "height",
    "tower:type",
    "building",
    "aeroway",
    "ref",
    "start_date",
    "website",
    "phone",
    "description",
)

Tags = Mapping[str, str]
TypeValue = Union[str, Callable[[Tags], str]]


def _has(key: str, value: Optional[str] = None) -> Callable[[Tags], bool]:
    if value is None:
        return lambda tags: bool(tags.get(key))
    return lambda tags: tags.get(key) == value


def _generator_type(tags: Tags) -> str:
    return tags.get("generator:source") or "generator"


# Ordered (predicate, type) pairs; the first predicate that holds decides.
TYPE_INFERENCE_RULES: List[Tuple[Callable[[Tags], bool], TypeValue]] = [
    (_has("tower:type"), lambda tags: f"tower:{tags['tower:type']}"),
    (_has("building", "data_centre"), "data_center"),
    (_has("telecom", "data_center"), "data_center"),
    (_has("power", "plant"), "power_plant"),
    (_has("power", "substation"), "substation"),
    (_has("power", "generator"), _generator_type),
    (_has("power", "transformer"), "transformer"),
    (_has("power", "line"), "power_line"),
    (_has("power", "minor_line"), "power_line"),
    (_has("aeroway", "aerodrome"), "airport"),
    (_has("aeroway", "helipad"), "helipad"),
    (_has("man_made", "tower"), "tower"),
    (_has("man_made", "mast"), "mast"),
    (_has("man_made", "pipeline"), "pipeline"),
    (_has("man_made", "petroleum_well"), "oil_well"),
    (_has("man_made", "water_tower"), "water_tower"),
    (_has("man_made", "wastewater_plant"), "wastewater"),
    (_has("man_made", "water_works"), "water_treatment"),
    (_has("man_made", "storage_tank"), "storage_tank"),
    (_has("landuse", "port"), "port"),
    (_has("harbour"), "harbour"),
    (_has("building", "warehouse"), "warehouse"),
    (_has("landuse", "railway"), "railyard"),
    (_has("railway", "station"), "train_station"),
    (_has("landuse", "military"), "military"),
    (_has("military"), "military"),
    (_has("landuse", "industrial"), "industrial"),
    (_has("amenity", "prison"), "prison"),
    (_has("amenity", "hospital"), "hospital"),
    (_has("amenity", "embassy"), "embassy"),
    (_has("amenity", "fuel"), "fuel"),
    (_has("waterway", "dam"), "dam"),
    (_has("building", "industrial"), "factory"),
]


def extract_name(tags: Tags) -> str:
    for key in NAME_KEYS:
        value = tags.get(key)
        if value:
            return value
    return UNNAMED


def infer_type(tags: Tags) -> str:
    for predicate, value in TYPE_INFERENCE_RULES:
        if predicate(tags):
            return value(tags) if callable(value) else value
    return FALLBACK_TYPE


def filter_tags(tags: Tags, mode: Optional[str] = None) -> Dict[str, str]:
    """Keep every tag in "full" mode, otherwise only the relevant keys."""
    if (mode or settings.ASSET_TAGS_MODE) == "full":
        return dict(tags)
    return {key: tags[key] for key in RELEVANT_TAG_KEYS if tags.get(key)}


def element_coordinates(element: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    """Own lat/lon for nodes, the centroid for ways and relations."""
    lat = element.get("lat")
    lon = element.get("lon")
    if lat is None or lon is None:
        center = element.get("center") or {}
        lat = center.get("lat")
        lon = center.get("lon")
    if lat is None or lon is None:
        return None
    return float(lat), float(lon)


def normalize_element(element: Mapping[str, Any], tags_mode: Optional[str] = None) -> Optional[Asset]:
    coords = element_coordinates(element)
    if coords is None:
        return None
    tags = element.get("tags") or {}
    return Asset(
        id=f"{element.get('type')}/{element.get('id')}",
        name=extract_name(tags),
        type=infer_type(tags),
        operator=tags.get("operator") or None,
        lat=coords[0],
        lon=coords[1],
        tags=filter_tags(tags, tags_mode),
    )


def normalize_elements(elements: Iterable[Mapping[str, Any]], tags_mode: Optional[str] = None) -> List[Asset]:
    assets: List[Asset] = []
    dropped = 0
    for element in elements:
        asset = normalize_element(element, tags_mode)
        if asset is None:
            dropped += 1
            continue
        assets.append(asset)
    if dropped:
        logger.debug("Dropped %d elements without coordinates", dropped)
    return assets


def calculate_stats(assets: Iterable[Asset]) -> SearchStats:
    """Count assets per operator ("Unknown" when missing) and per type."""
    operators: Counter = Counter()
    types: Counter = Counter()
    total = 0
    for asset in assets:
        total += 1
        operators[asset.operator or UNKNOWN_OPERATOR] += 1
        types[asset.type] += 1
    return SearchStats(total=total, operators=dict(operators), types=dict(types))
