import pytest

from domain.models import ParsedQuery
from services.query_parser import (
    extract_operator,
    extract_type,
    parse_query,
    validate_query,
)


def test_structured_query_extracts_each_field():
    parsed = parse_query("type:data_center operator:google region:california")
    assert parsed.type == "data_center"
    assert parsed.operator == "google"
    assert parsed.region == "california"
    assert parsed.near is None
    assert parsed.country is None
    assert parsed.radius == 50
    assert parsed.raw == "type:data_center operator:google region:california"


def test_structured_query_replaces_underscores_and_lowercases_operator():
    parsed = parse_query(
        "near:new_delhi type:power_plant operator:Tata_Power country:India radius:25"
    )
    assert parsed.near == "new delhi"
    assert parsed.type == "power_plant"
    assert parsed.operator == "tata power"
    assert parsed.country == "India"
    assert parsed.radius == 25


def test_structured_prefix_is_case_insensitive():
    parsed = parse_query("TYPE:Bank Region:Paris")
    assert parsed.type == "bank"
    assert parsed.region == "Paris"


def test_structured_unknown_type_is_ignored():
    parsed = parse_query("type:spaceport region:florida")
    assert parsed.type is None
    assert parsed.region == "florida"


def test_structured_key_must_start_a_token():
    parsed = parse_query("region:subtype:bank")
    assert parsed.type is None
    assert parsed.region == "subtype:bank"


@pytest.mark.parametrize(
    "radius_token, expected",
    [
        ("radius:0", 1),
        ("radius:1", 1),
        ("radius:120", 120),
        ("radius:500", 500),
        ("radius:9999", 500),
        ("radius:abc", 50),
        ("radius:-5", 50),
    ],
)
def test_structured_radius_is_clamped(radius_token, expected):
    parsed = parse_query(f"{radius_token} type:bank region:lyon")
    assert parsed.radius == expected


def test_natural_query_with_in_pattern():
    parsed = parse_query("telecom towers in karnataka")
    assert parsed.type == "telecom"
    assert parsed.region == "karnataka"
    assert parsed.near is None
    assert parsed.operator is None
    assert parsed.radius == 50


def test_natural_query_with_near_and_radius():
    parsed = parse_query("google data centers near dublin within 20 km")
    assert parsed.type == "data_center"
    assert parsed.operator == "google"
    assert parsed.near == "dublin"
    assert parsed.region is None
    assert parsed.radius == 20


def test_near_takes_precedence_over_in():
    parsed = parse_query("hospitals near pune in maharashtra")
    assert parsed.near == "pune"
    assert parsed.region is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("schools near goa within 0 km", 1),
        ("schools near goa radius=700", 500),
        ("schools near goa radius: 75 kilometres", 75),
        ("schools near goa", 50),
    ],
)
def test_natural_radius_is_clamped(text, expected):
    assert parse_query(text).radius == expected


def test_natural_residual_text_becomes_region():
    parsed = parse_query("show google data centers california")
    assert parsed.type == "data_center"
    assert parsed.operator == "google"
    assert parsed.region == "california"


def test_natural_short_residual_is_not_a_region():
    parsed = parse_query("banks xy")
    assert parsed.type == "bank"
    assert parsed.region is None
    assert parsed.near is None


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_input_parses_to_defaults(text):
    parsed = parse_query(text)
    assert parsed == ParsedQuery()
    assert parsed.radius == 50
    assert parsed.raw == ""


def test_type_rules_prefer_specific_phrasings():
    assert extract_type("communication masts") == "telecom"
    assert extract_type("masts") == "mast"
    assert extract_type("solar farms") == "solar"
    assert extract_type("substations") == "substation"
    assert extract_type("somewhere quiet") is None


def test_operator_aliases_map_to_canonical_name():
    assert extract_operator("reliance jio towers") == "jio"
    assert extract_operator("AWS data centers in oregon") == "amazon"
    assert extract_operator("Microsoft Azure regions") == "microsoft"
    assert extract_operator("hospitals in lyon") is None


def test_operator_matching_is_substring_based():
    # "vi" (a vodafone alias) occurs inside "service"
    assert extract_operator("service stations") == "vodafone"


def test_parsed_query_is_immutable():
    parsed = parse_query("type:bank region:paris")
    with pytest.raises(Exception):
        parsed.type = "atm"  # type: ignore[misc]


def test_validate_requires_type_or_operator():
    result = validate_query(ParsedQuery(region="x"))
    assert result.valid is False
    assert "asset type or operator" in result.error


def test_validate_requires_geographic_scope():
    result = validate_query(ParsedQuery(type="bank"))
    assert result.valid is False
    assert "geographic scope" in result.error


@pytest.mark.parametrize(
    "parsed",
    [
        ParsedQuery(type="bank", region="paris"),
        ParsedQuery(operator="google", country="ireland"),
        ParsedQuery(type="hospital", near="pune"),
    ],
)
def test_validate_accepts_complete_queries(parsed):
    result = validate_query(parsed)
    assert result.valid is True
    assert result.error is None
