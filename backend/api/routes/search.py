"""
Search API routes.

POST /api/search runs the full pipeline for one query string.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from domain.errors import InternalError, SightlineError
from services.search_pipeline import get_default_search_service

logger = logging.getLogger(__name__)

router = APIRouter()


class SearchRequest(BaseModel):
    # Left untyped so a non-string query reports MISSING_QUERY, not a 422
    query: Any = None


class AssetResponse(BaseModel):
    id: str
    name: str
    type: str
    operator: Optional[str] = None
    lat: float
    lon: float
    tags: Dict[str, str]


class StatsResponse(BaseModel):
    total: int
    operators: Dict[str, int]
    types: Dict[str, int]


class ParsedQueryResponse(BaseModel):
    type: Optional[str] = None
    operator: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    near: Optional[str] = None
    radius: int
    raw: str


class SearchResponse(BaseModel):
    results: List[AssetResponse]
    stats: StatsResponse
    bounds: Optional[List[float]] = None
    query: ParsedQueryResponse


class ErrorResponse(BaseModel):
    error: str
    code: str


def error_response(exc: SightlineError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@router.post(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
def search(request: SearchRequest):
    """Interpret the query, resolve its location and return matching assets."""
    try:
        result = get_default_search_service().search(request.query)
    except SightlineError as exc:
        if exc.status_code >= 500 or exc.status_code == 429:
            logger.warning("Search failed upstream (%s): %s", exc.code, exc.message)
        return error_response(exc)
    except Exception:
        logger.exception("Search error")
        return error_response(InternalError())
    return result.to_dict()


@router.get("/search", response_model=ErrorResponse, status_code=405)
def search_method_not_allowed():
    return JSONResponse(
        status_code=405,
        content={"error": "Method not allowed. Use POST.", "code": "METHOD_NOT_ALLOWED"},
    )
