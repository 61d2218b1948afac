import pytest

from domain.models import Asset
from services.normalizer import (
    calculate_stats,
    extract_name,
    filter_tags,
    infer_type,
    normalize_element,
)


def _asset(id, operator, type_):
    return Asset(id=id, name="x", type=type_, operator=operator, lat=0.0, lon=0.0)


@pytest.mark.parametrize(
    "tags, expected",
    [
        ({"name": "Main", "name:en": "Other"}, "Main"),
        ({"name:en": "English"}, "English"),
        ({"ref": "T-12", "operator": "Airtel"}, "T-12"),
        ({"operator": "Airtel"}, "Airtel"),
        ({}, "Unnamed"),
    ],
)
def test_extract_name_priority(tags, expected):
    assert extract_name(tags) == expected


@pytest.mark.parametrize(
    "tags, expected",
    [
        ({"tower:type": "communication", "man_made": "tower"}, "tower:communication"),
        ({"building": "data_centre"}, "data_center"),
        ({"power": "plant"}, "power_plant"),
        ({"power": "generator", "generator:source": "wind"}, "wind"),
        ({"power": "generator"}, "generator"),
        ({"aeroway": "aerodrome"}, "airport"),
        ({"military": "bunker"}, "military"),
        ({"shop": "bakery"}, "infrastructure"),
    ],
)
def test_infer_type(tags, expected):
    assert infer_type(tags) == expected


def test_filter_tags_relevant_mode_keeps_allow_list():
    tags = {"name": "X", "operator": "Y", "source": "survey", "height": "40"}
    assert filter_tags(tags, "relevant") == {"name": "X", "operator": "Y", "height": "40"}


def test_filter_tags_full_mode_keeps_everything():
    tags = {"name": "X", "source": "survey"}
    assert filter_tags(tags, "full") == tags


def test_normalize_way_uses_center():
    asset = normalize_element(
        {"type": "way", "id": 9, "center": {"lat": 51.5, "lon": -0.1}, "tags": {"operator": "Google"}}
    )
    assert asset.id == "way/9"
    assert (asset.lat, asset.lon) == (51.5, -0.1)
    assert asset.operator == "Google"
    assert asset.name == "Google"


def test_normalize_without_coordinates_is_dropped():
    assert normalize_element({"type": "relation", "id": 1, "tags": {}}) is None


def test_normalize_empty_operator_is_none():
    asset = normalize_element({"type": "node", "id": 1, "lat": 0, "lon": 0, "tags": {"operator": ""}})
    assert asset.operator is None


def test_calculate_stats_counts_unknown_operator():
    stats = calculate_stats([
        _asset("node/1", "google", "data_center"),
        _asset("node/2", "google", "data_center"),
        _asset("node/3", None, "data_center"),
    ])
    assert stats.total == 3
    assert stats.operators == {"google": 2, "Unknown": 1}
    assert stats.types == {"data_center": 3}


def test_calculate_stats_empty():
    stats = calculate_stats([])
    assert stats.total == 0
    assert stats.operators == {}
    assert stats.types == {}
