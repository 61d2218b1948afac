"""
Nominatim proxy routes.

Lets the browser UI geocode through the backend so all requests share the
process-wide rate limit and the configured User-Agent.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from domain.errors import InternalError, SightlineError
from services.geocoding import PROXY_ENDPOINTS, get_default_location_resolver

logger = logging.getLogger(__name__)

router = APIRouter()

PROXY_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"


@router.get("/nominatim")
def nominatim_proxy(request: Request, endpoint: str = "search"):
    if endpoint not in PROXY_ENDPOINTS:
        return JSONResponse(
            status_code=400,
            content={"error": f"Unsupported endpoint: {endpoint}", "code": "INVALID_ENDPOINT"},
        )

    params = {k: v for k, v in request.query_params.items() if k != "endpoint"}
    try:
        data = get_default_location_resolver().proxy(endpoint, params)
    except SightlineError as exc:
        logger.warning("Nominatim proxy failed (%s): %s", exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
    except Exception:
        logger.exception("Nominatim proxy error")
        return JSONResponse(status_code=500, content=InternalError().to_dict())

    return JSONResponse(content=data, headers={"Cache-Control": PROXY_CACHE_CONTROL})
