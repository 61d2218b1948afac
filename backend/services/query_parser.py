"""
Query interpretation: raw search text -> ParsedQuery.

Two input modes are supported:
- structured: space-separated `key:value` tokens, e.g.
  ``type:data_center operator:google region:california radius:25``
  (multi-word values use ``_`` in place of spaces)
- natural: free text such as ``telecom towers in karnataka`` or
  ``google data centers near dublin within 20 km``

Validation is a separate step (`validate_query`) so that an empty or
scope-less query still parses cleanly.
"""
from __future__ import annotations

import re
from typing import List, Optional, Pattern, Tuple

from domain.models import (
    DEFAULT_RADIUS_KM,
    MAX_RADIUS_KM,
    MIN_RADIUS_KM,
    ParsedQuery,
    ValidationResult,
)
from domain.taxonomy import OPERATOR_ALIASES, is_known_type

STRUCTURED_PREFIX_RE = re.compile(r"^(?:type|operator|region|country|near|radius):", re.IGNORECASE)

NEAR_RE = re.compile(r"\bnear\s+(.+?)(?:\s+(?:in|within|radius)\b|$)", re.IGNORECASE)
IN_RE = re.compile(r"\bin\s+(.+?)(?:\s+(?:near|within)\b|$)", re.IGNORECASE)
RADIUS_RE = re.compile(
    r"(?:within|radius)\s*[:=]?\s*(\d+)\s*(?:km|kilometers?|kilometres?)?", re.IGNORECASE
)
STOP_WORDS_RE = re.compile(r"\b(?:the|a|an|all|show|find|search|get|list)\b", re.IGNORECASE)

_STRUCTURED_FIELDS = ("type", "operator", "region", "country", "near", "radius")


def _rule(pattern: str, type_key: str) -> Tuple[Pattern[str], str]:
    return re.compile(pattern, re.IGNORECASE), type_key


# First match wins, independent of match position or length. Specific
# phrasings must come before their generic super-strings ("telecom tower"
# before "tower").
TYPE_RULES: List[Tuple[Pattern[str], str]] = [
    _rule(r"\b(?:telecom|communication)\s*(?:tower|mast)s?\b", "telecom"),
    _rule(r"\btowers?\b", "telecom"),
    _rule(r"\bdata\s*cent(?:er|re)s?\b", "data_center"),
    _rule(r"\bpower\s*(?:plant|station)s?\b", "power_plant"),
    _rule(r"\bsubstations?\b", "substation"),
    _rule(r"\bports?\b", "port"),
    _rule(r"\bharbou?rs?\b", "harbour"),
    _rule(r"\bwarehouses?\b", "warehouse"),
    _rule(r"\bairports?\b", "airport"),
    _rule(r"\bhelipads?\b", "helipad"),
    _rule(r"\brail(?:way)?\s*yards?\b", "railyard"),
    _rule(r"\brefiner(?:y|ies)\b", "refinery"),
    _rule(r"\bpipelines?\b", "pipeline"),
    _rule(r"\bsolar\s*(?:farm|plant|panel)s?\b", "solar"),
    _rule(r"\bwind\s*(?:farm|turbine)s?\b", "wind"),
    _rule(r"\bnuclear\s*(?:plant|reactor)s?\b", "nuclear"),
    _rule(r"\bdams?\b", "dam"),
    # Energy & power
    _rule(r"\bgeothermal\s*(?:plant|power|energy)?\b", "geothermal"),
    _rule(r"\bbiogas\s*(?:plant|facility)?\b", "biogas"),
    _rule(r"\bbiomass\s*(?:plant|power|facility)?\b", "biomass"),
    _rule(r"\btidal\s*(?:power|plant|energy)?\b", "tidal"),
    _rule(r"\bgas\s*(?:power\s*)?(?:plant|station)s?\b", "gas_power"),
    _rule(r"\boil\s*(?:power\s*)?(?:plant|station)s?\b", "oil_power"),
    _rule(r"\bcoal\s*(?:power\s*)?(?:plant|station)s?\b", "coal"),
    _rule(r"\bhydro(?:electric)?\s*(?:plant|power|dam)?\b", "hydroelectric"),
    _rule(r"\bpower\s*lines?\b", "power_line"),
    _rule(r"\b(?:electricity|electric|power)\s*poles?\b", "power_pole"),
    _rule(r"\btransformers?\b", "transformer"),
    # Security & civic
    _rule(r"\bmilitary\s*(?:base|installation|facility)?\b", "military"),
    _rule(r"\bprisons?\b", "prison"),
    _rule(r"\bhospitals?\b", "hospital"),
    _rule(r"\bembass(?:y|ies)\b", "embassy"),
    _rule(r"\bfactor(?:y|ies)\b", "factory"),
    _rule(r"\bindustrial\s*(?:zone|area|park)s?\b", "industrial"),
    _rule(r"\bschools?\b", "school"),
    _rule(r"\buniversit(?:y|ies)\b", "university"),
    _rule(r"\bcolleges?\b", "college"),
    _rule(r"\bstadiums?\b", "stadium"),
    _rule(r"\bfire\s*stations?\b", "fire_station"),
    _rule(r"\bpolice\s*(?:station)?s?\b", "police"),
    _rule(r"\bcourthouse?s?\b", "courthouse"),
    _rule(r"\bbanks?\b", "bank"),
    _rule(r"\batms?\b", "atm"),
    _rule(r"\b(?:fuel|gas|petrol)\s*stations?\b", "fuel"),
    _rule(r"\b(?:ev\s*)?charging\s*stations?\b", "charging_station"),
    _rule(r"\bwater\s*towers?\b", "water_tower"),
    _rule(r"\bwater\s*(?:treatment|works)\b", "water_treatment"),
    _rule(r"\b(?:wastewater|sewage)\s*(?:plant|treatment)?\b", "wastewater"),
    _rule(r"\blandfills?\b", "landfill"),
    _rule(r"\b(?:quarr(?:y|ies)|mines?)\b", "quarry"),
    _rule(r"\boil\s*wells?\b", "oil_well"),
    _rule(r"\bgas\s*wells?\b", "gas_well"),
    _rule(r"\bstorage\s*tanks?\b", "storage_tank"),
    _rule(r"\bsilos?\b", "silo"),
    _rule(r"\bchimne(?:y|ys)\b", "chimney"),
    _rule(r"\bcooling\s*towers?\b", "cooling_tower"),
    _rule(r"\blighthouses?\b", "lighthouse"),
    _rule(r"\bradars?\b", "radar"),
    _rule(r"\bantennas?\b", "antenna"),
    _rule(r"\bmasts?\b", "mast"),
    _rule(r"\bbridges?\b", "bridge"),
    _rule(r"\btunnels?\b", "tunnel"),
    _rule(r"\bferr(?:y|ies)\s*terminals?\b", "ferry_terminal"),
    _rule(r"\bbus\s*stations?\b", "bus_station"),
    _rule(r"\b(?:train|railway)\s*stations?\b", "train_station"),
    _rule(r"\bmetro\s*(?:station)?s?\b", "metro"),
    _rule(r"\bsubway\s*(?:station)?s?\b", "metro"),
    _rule(r"\bparking\b", "parking"),
    _rule(r"\bcemeter(?:y|ies)\b", "cemetery"),
    _rule(r"\bmosques?\b", "mosque"),
    _rule(r"\bchurche?s?\b", "church"),
    _rule(r"\btemples?\b", "temple"),
    _rule(r"\bsynagogues?\b", "synagogue"),
    _rule(r"\blibrar(?:y|ies)\b", "library"),
    _rule(r"\bmuseums?\b", "museum"),
    _rule(r"\btheat(?:er|re)s?\b", "theatre"),
    _rule(r"\bcinemas?\b", "cinema"),
    _rule(r"\bhotels?\b", "hotel"),
    _rule(r"\bpharmac(?:y|ies)\b", "pharmacy"),
    _rule(r"\bclinics?\b", "clinic"),
    _rule(r"\bdentists?\b", "dentist"),
    _rule(r"\bvets?\b", "veterinary"),
    _rule(r"\bveterinar(?:y|ies)\b", "veterinary"),
    _rule(r"\bpost\s*offic(?:e|es)\b", "post_office"),
    _rule(r"\brecycling\s*(?:cent(?:er|re))?s?\b", "recycling"),
    _rule(r"\bobservator(?:y|ies)\b", "observatory"),
    _rule(r"\bcranes?\b", "crane"),
    _rule(r"\bwindmills?\b", "windmill"),
    _rule(r"\bwatermills?\b", "watermill"),
    _rule(r"\bgasometers?\b", "gasometer"),
    _rule(r"\bbunkers?\b", "bunker"),
    _rule(r"\bbarracks\b", "barracks"),
    _rule(r"\bairfields?\b", "airfield"),
    _rule(r"\bnaval\s*bases?\b", "naval_base"),
    _rule(r"\b(?:firing|shooting)\s*ranges?\b", "range"),
    _rule(r"\bcheckpoints?\b", "checkpoint"),
    _rule(r"\bborder\s*(?:control|crossing)s?\b", "border_control"),
    # Emergency services
    _rule(r"\bambulance\s*(?:station|depot|base)s?\b", "ambulance_station"),
    _rule(r"\brescue\s*(?:station|team|base)s?\b", "rescue_station"),
    _rule(r"\blifeguard\s*(?:station|tower|post)s?\b", "lifeguard"),
    _rule(r"\bfire\s*hydrants?\b", "fire_hydrant"),
    _rule(r"\b(?:emergency|sos)\s*(?:phone|call\s*box)s?\b", "emergency_phone"),
    _rule(r"\bcoast\s*guards?\s*(?:station|base)?\b", "coast_guard"),
    # Aviation
    _rule(r"\btaxiways?\b", "taxiway"),
    _rule(r"\brunways?\b", "runway"),
    _rule(r"\b(?:airport|airline)?\s*terminals?\b", "terminal"),
    _rule(r"\bhangars?\b", "hangar"),
    _rule(r"\b(?:atc|air\s*traffic\s*control)\s*(?:tower)?s?\b", "atc_tower"),
    # Maritime
    _rule(r"\bdocks?\b", "dock"),
    _rule(r"\bmarinas?\b", "marina"),
    _rule(r"\bshipyards?\b", "shipyard"),
    _rule(r"\bseaports?\b", "seaport"),
    # Rail & road
    _rule(r"\btram\s*(?:stop|station)s?\b", "tram_stop"),
    _rule(r"\b(?:railway|train)\s*halts?\b", "halt"),
    _rule(r"\blevel\s*crossings?\b", "level_crossing"),
    _rule(r"\b(?:railroad|railway)\s*crossings?\b", "level_crossing"),
    _rule(r"\btoll\s*(?:booth|plaza|station)s?\b", "toll_booth"),
    _rule(r"\bweigh\s*(?:station|bridge)s?\b", "weigh_station"),
    _rule(r"\brest\s*(?:area|stop)s?\b", "rest_area"),
    _rule(r"\bservice\s*(?:area|station|plaza)s?\b", "service_area"),
]


def clamp_radius(value: int) -> int:
    return max(MIN_RADIUS_KM, min(value, MAX_RADIUS_KM))


def is_structured_query(text: str) -> bool:
    return bool(STRUCTURED_PREFIX_RE.match(text))


def _structured_value(text: str, key: str) -> Optional[str]:
    match = re.search(rf"(?:^|\s){key}:(\S+)", text, re.IGNORECASE)
    return match.group(1) if match else None


def parse_structured(text: str) -> ParsedQuery:
    values = {key: _structured_value(text, key) for key in _STRUCTURED_FIELDS}

    asset_type = None
    if values["type"]:
        type_key = values["type"].lower()
        # Unknown types are dropped silently; validation reports what is missing
        if is_known_type(type_key):
            asset_type = type_key

    operator = values["operator"]
    if operator:
        operator = operator.lower().replace("_", " ")

    radius = DEFAULT_RADIUS_KM
    if values["radius"] and values["radius"].isdigit():
        radius = clamp_radius(int(values["radius"]))

    def _spaced(value: Optional[str]) -> Optional[str]:
        return value.replace("_", " ") if value else None

    return ParsedQuery(
        type=asset_type,
        operator=operator,
        region=_spaced(values["region"]),
        country=_spaced(values["country"]),
        near=_spaced(values["near"]),
        radius=radius,
        raw=text,
    )


def extract_type(text: str) -> Optional[str]:
    for pattern, type_key in TYPE_RULES:
        if pattern.search(text):
            return type_key
    return None


def extract_operator(text: str) -> Optional[str]:
    """
    Return the canonical operator whose name or alias occurs in *text*.

    This is plain substring containment, so short names like "vi" or "att"
    also match inside unrelated words.
    """
    normalized = text.lower()
    for canonical, aliases in OPERATOR_ALIASES.items():
        if canonical in normalized:
            return canonical
        for alias in aliases:
            if alias in normalized:
                return canonical
    return None


def _strip_filters(text: str) -> str:
    """Remove type phrases and operator names, leaving the location words."""
    cleaned = text
    for pattern, _ in TYPE_RULES:
        cleaned = pattern.sub("", cleaned, count=1)
    for canonical, aliases in OPERATOR_ALIASES.items():
        for name in (canonical, *aliases):
            cleaned = re.sub(re.escape(name), "", cleaned, flags=re.IGNORECASE)
    return cleaned


def extract_location(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (region, near) for natural-language text."""
    near_match = NEAR_RE.search(text)
    if near_match:
        return None, near_match.group(1).strip()

    in_match = IN_RE.search(text)
    if in_match:
        return in_match.group(1).strip(), None

    residual = STOP_WORDS_RE.sub("", _strip_filters(text))
    residual = " ".join(residual.split())
    if 2 < len(residual) < 100:
        return residual, None
    return None, None


def extract_radius(text: str) -> int:
    match = RADIUS_RE.search(text)
    if not match:
        return DEFAULT_RADIUS_KM
    return clamp_radius(int(match.group(1)))


def parse_natural(text: str) -> ParsedQuery:
    region, near = extract_location(text)
    return ParsedQuery(
        type=extract_type(text),
        operator=extract_operator(text),
        region=region,
        near=near,
        radius=extract_radius(text),
        raw=text,
    )


def parse_query(text: str) -> ParsedQuery:
    """Parse raw search text in either structured or natural mode."""
    trimmed = (text or "").strip()
    if not trimmed:
        return ParsedQuery()
    if is_structured_query(trimmed):
        return parse_structured(trimmed)
    return parse_natural(trimmed)


def validate_query(parsed: ParsedQuery) -> ValidationResult:
    """Check that a parsed query names what to find and where."""
    if not parsed.type and not parsed.operator:
        return ValidationResult(
            valid=False,
            error=(
                "Query must specify an asset type or operator. Examples: "
                '"telecom towers in karnataka" or "type:data_center operator:google"'
            ),
        )
    if not parsed.region and not parsed.near and not parsed.country:
        return ValidationResult(
            valid=False,
            error=(
                "Query must specify a geographic scope. Examples: "
                '"in mumbai", "near delhi", or "region:karnataka"'
            ),
        )
    return ValidationResult(valid=True)
