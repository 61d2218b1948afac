"""
Overpass query execution with ordered endpoint failover.

Mirrors are tried strictly one after another. The first successful
response wins; if every mirror fails, the last failure is raised.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from domain.errors import UpstreamError, UpstreamRateLimited, UpstreamTimeout, UpstreamUnavailable
from domain.models import Asset
from services.normalizer import normalize_elements
from settings import settings

logger = logging.getLogger(__name__)

_session = requests.Session()

OVERPASS_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


class OverpassExecutor:
    def __init__(
        self,
        endpoints: Optional[Sequence[str]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        tags_mode: Optional[str] = None,
    ):
        self.endpoints = list(endpoints or settings.OVERPASS_ENDPOINTS)
        if not self.endpoints:
            raise ValueError("At least one Overpass endpoint is required")
        self.session = session or _session
        self.timeout = timeout if timeout is not None else settings.OVERPASS_TIMEOUT
        self.tags_mode = tags_mode

    def _post(self, endpoint: str, query: str) -> Dict[str, Any]:
        """Run *query* on one endpoint, classifying any failure."""
        try:
            resp = self.session.post(
                endpoint,
                data={"data": query},
                headers=OVERPASS_HEADERS,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise UpstreamTimeout(f"Overpass request timed out: {exc}", endpoint=endpoint) from exc
        except requests.RequestException as exc:
            raise UpstreamUnavailable(f"Overpass request failed: {exc}", endpoint=endpoint) from exc

        if resp.status_code == 429:
            raise UpstreamRateLimited("Rate limited by Overpass API", endpoint=endpoint)
        if not resp.ok:
            raise UpstreamUnavailable(f"Overpass API request failed: {resp.status_code}", endpoint=endpoint)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamUnavailable(f"Overpass returned invalid JSON: {exc}", endpoint=endpoint) from exc
        if not isinstance(payload, dict):
            raise UpstreamUnavailable("Overpass returned an unexpected payload", endpoint=endpoint)

        # Server-side limits still answer 200, with partial elements and a remark
        remark = str(payload.get("remark") or "")
        if "runtime error" in remark.lower():
            if "timed out" in remark.lower() or "timeout" in remark.lower():
                raise UpstreamTimeout(f"Overpass query timed out: {remark}", endpoint=endpoint)
            raise UpstreamUnavailable(f"Overpass runtime error: {remark}", endpoint=endpoint)
        return payload

    def execute_with_failover(self, query: str) -> Dict[str, Any]:
        """Return the decoded response of the first endpoint that succeeds."""
        last_error: Optional[UpstreamError] = None
        for index, endpoint in enumerate(self.endpoints):
            try:
                payload = self._post(endpoint, query)
            except UpstreamError as exc:
                last_error = exc
                remaining = len(self.endpoints) - index - 1
                logger.warning(
                    "Overpass endpoint %s failed (%s): %s; %d endpoint(s) left",
                    endpoint,
                    exc.code,
                    exc.message,
                    remaining,
                )
                continue
            if index:
                logger.info("Overpass query served by fallback endpoint %s", endpoint)
            return payload
        assert last_error is not None
        raise last_error

    def execute(self, query: str) -> List[Asset]:
        payload = self.execute_with_failover(query)
        elements = payload.get("elements") or []
        return normalize_elements(elements, self.tags_mode)


_default_executor: Optional[OverpassExecutor] = None


def get_default_overpass_executor() -> OverpassExecutor:
    global _default_executor
    if _default_executor is None:
        _default_executor = OverpassExecutor()
    return _default_executor
