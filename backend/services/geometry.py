"""Bounding-box math and Overpass area-id encoding."""

from __future__ import annotations

import math
from typing import Optional

from domain.models import BoundingBox

KM_PER_DEGREE = 111.0

# Overpass derives area ids from the element id of the closed way/relation
RELATION_AREA_OFFSET = 3_600_000_000
WAY_AREA_OFFSET = 2_400_000_000

_MIN_COS = 1e-6


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def bounding_box(lat: float, lon: float, radius_km: float) -> BoundingBox:
    """
    Approximate a circle of *radius_km* around (lat, lon) with a box.

    Near the poles cos(lat) approaches zero and the longitude delta blows
    up; the cosine is floored, latitudes are clamped to [-90, 90] and a
    delta of 180 degrees or more spans every longitude.
    """
    lat_delta = radius_km / KM_PER_DEGREE
    lon_delta = radius_km / (KM_PER_DEGREE * max(math.cos(math.radians(lat)), _MIN_COS))

    south = _clamp(lat - lat_delta, -90.0, 90.0)
    north = _clamp(lat + lat_delta, -90.0, 90.0)
    if lon_delta >= 180.0:
        return BoundingBox(south, north, -180.0, 180.0)
    return BoundingBox(south, north, lon - lon_delta, lon + lon_delta)


def expand_bbox(bbox: BoundingBox, factor: float = 1.1) -> BoundingBox:
    """Scale *bbox* symmetrically about its own center."""
    lat_center = (bbox.south + bbox.north) / 2
    lon_center = (bbox.west + bbox.east) / 2
    lat_half = (bbox.north - bbox.south) / 2 * factor
    lon_half = (bbox.east - bbox.west) / 2 * factor
    return BoundingBox(
        lat_center - lat_half,
        lat_center + lat_half,
        lon_center - lon_half,
        lon_center + lon_half,
    )


def bbox_to_overpass(bbox: BoundingBox) -> str:
    """Overpass expects (south, west, north, east)."""
    return f"{bbox.south},{bbox.west},{bbox.north},{bbox.east}"


def osm_id_to_area_id(osm_type: Optional[str], osm_id: Optional[int]) -> Optional[int]:
    """Convert a way/relation id to its Overpass area id; nodes have none."""
    if osm_id is None:
        return None
    if osm_type == "relation":
        return osm_id + RELATION_AREA_OFFSET
    if osm_type == "way":
        return osm_id + WAY_AREA_OFFSET
    return None
