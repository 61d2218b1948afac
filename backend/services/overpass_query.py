"""
Overpass QL query construction.

A type query emits one node/way/relation selector per tag group of the
asset type; an operator-only query filters every element kind by operator
name. Both are scoped either to an Overpass area id or to a bounding box.
"""
from __future__ import annotations

import re
from typing import List, Optional

from domain.models import BoundingBox
from domain.taxonomy import AnyOfTag, ExactTag, TagGroup, TagPredicate, get_asset_type
from services.geometry import bbox_to_overpass
from settings import settings

ELEMENT_KINDS = ("node", "way", "relation")
QUERY_TIMEOUT_SECONDS = 25
QUERY_MAXSIZE_BYTES = 50_000_000

_REGEX_META_RE = re.compile(r"([.^$*+?()\[\]{}|\\])")


def _regex_literal(value: str) -> str:
    """Escape POSIX ERE metacharacters so *value* matches literally."""
    return _REGEX_META_RE.sub(r"\\\1", value)


def _ql_string(value: str) -> str:
    """Escape a value for use inside a double-quoted QL string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def tag_filter(predicate: TagPredicate) -> str:
    if isinstance(predicate, AnyOfTag):
        alternation = "|".join(_ql_string(v) for v in predicate.values)
        return f'["{_ql_string(predicate.key)}"~"{alternation}",i]'
    if isinstance(predicate, ExactTag):
        return f'["{_ql_string(predicate.key)}"="{_ql_string(predicate.value)}"]'
    raise TypeError(f"Unsupported tag predicate: {predicate!r}")


def group_filter(group: TagGroup) -> str:
    return "".join(tag_filter(p) for p in group)


def operator_filter(operator: Optional[str]) -> str:
    if not operator:
        return ""
    return f'["operator"~"{_ql_string(_regex_literal(operator))}",i]'


def location_filter(bbox: BoundingBox, area_id: Optional[int] = None) -> str:
    if area_id:
        return f"(area:{area_id})"
    return f"({bbox_to_overpass(bbox)})"


def _wrap(statements: List[str], max_results: int) -> str:
    body = "\n".join(f"  {s};" for s in statements)
    return (
        f"[out:json][timeout:{QUERY_TIMEOUT_SECONDS}][maxsize:{QUERY_MAXSIZE_BYTES}];\n"
        f"(\n{body}\n);\n"
        f"out center {max_results};"
    )


def build_overpass_query(
    asset_type: str,
    bbox: BoundingBox,
    operator: Optional[str] = None,
    area_id: Optional[int] = None,
    max_results: Optional[int] = None,
) -> str:
    """Build a query for every element tagged as *asset_type* in the given scope."""
    spec = get_asset_type(asset_type)
    if spec is None:
        raise ValueError(f"Unknown asset type: {asset_type}")

    op_filter = operator_filter(operator)
    loc_filter = location_filter(bbox, area_id)
    statements = [
        f"{kind}{group_filter(group)}{op_filter}{loc_filter}"
        for group in spec.groups
        for kind in ELEMENT_KINDS
    ]
    return _wrap(statements, max_results or settings.OVERPASS_MAX_RESULTS)


def build_operator_query(
    bbox: BoundingBox,
    operator: str,
    area_id: Optional[int] = None,
    max_results: Optional[int] = None,
) -> str:
    """Build a query for anything run by *operator*, regardless of type."""
    op_filter = operator_filter(operator)
    loc_filter = location_filter(bbox, area_id)
    statements = [f"{kind}{op_filter}{loc_filter}" for kind in ELEMENT_KINDS]
    return _wrap(statements, max_results or settings.OVERPASS_MAX_RESULTS)
