import pytest
from fastapi.testclient import TestClient

import api.main as main_module
from api.routes import nominatim as nominatim_routes
from api.routes import search as search_routes
from domain.errors import (
    InvalidQuery,
    MissingQuery,
    QueryTooLong,
    UpstreamRateLimited,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from domain.models import Asset, BoundingBox, ParsedQuery, SearchResult, SearchStats


class StubService:
    def __init__(self, result=None, exc=None):
        self.result = result
        self.exc = exc
        self.queries = []

    def search(self, text):
        self.queries.append(text)
        if self.exc is not None:
            raise self.exc
        return self.result


class StubResolver:
    def __init__(self, data=None, exc=None):
        self.data = data
        self.exc = exc
        self.calls = []

    def proxy(self, endpoint, params):
        self.calls.append((endpoint, params))
        if self.exc is not None:
            raise self.exc
        return self.data


@pytest.fixture
def client():
    return TestClient(main_module.app)


@pytest.fixture
def use_service(monkeypatch):
    def _use(service):
        monkeypatch.setattr(search_routes, "get_default_search_service", lambda: service)
        return service

    return _use


@pytest.fixture
def use_resolver(monkeypatch):
    def _use(resolver):
        monkeypatch.setattr(nominatim_routes, "get_default_location_resolver", lambda: resolver)
        return resolver

    return _use


def _result():
    asset = Asset(
        id="way/10",
        name="DUB1",
        type="data_center",
        operator="Google",
        lat=53.3,
        lon=-6.3,
        tags={"building": "data_centre", "operator": "Google"},
    )
    return SearchResult(
        results=[asset],
        stats=SearchStats(total=1, operators={"Google": 1}, types={"data_center": 1}),
        bounds=BoundingBox(53.2, 53.4, -6.4, -6.1),
        query=ParsedQuery(type="data_center", operator="google", near="dublin", radius=20, raw="q"),
    )


def test_search_success_shape(client, use_service):
    service = use_service(StubService(result=_result()))
    resp = client.post("/api/search", json={"query": "google data centers near dublin within 20 km"})

    assert resp.status_code == 200
    body = resp.json()
    assert service.queries == ["google data centers near dublin within 20 km"]
    assert body["results"][0]["id"] == "way/10"
    assert body["results"][0]["tags"]["building"] == "data_centre"
    assert body["stats"] == {"total": 1, "operators": {"Google": 1}, "types": {"data_center": 1}}
    assert body["bounds"] == [53.2, 53.4, -6.4, -6.1]
    assert body["query"]["near"] == "dublin"
    assert body["query"]["radius"] == 20


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (MissingQuery(), 400, "MISSING_QUERY"),
        (QueryTooLong(600, 500), 400, "QUERY_TOO_LONG"),
        (InvalidQuery("Query must specify a geographic scope."), 400, "INVALID_QUERY"),
        (UpstreamRateLimited("429 from mirror"), 429, "RATE_LIMITED"),
        (UpstreamTimeout("read timeout"), 504, "TIMEOUT"),
        (UpstreamUnavailable("502 from mirror"), 502, "UPSTREAM_ERROR"),
    ],
)
def test_search_errors_map_to_status_and_code(client, use_service, exc, status, code):
    use_service(StubService(exc=exc))
    resp = client.post("/api/search", json={"query": "anything"})

    assert resp.status_code == status
    assert resp.json()["code"] == code
    assert set(resp.json()) == {"error", "code"}


def test_upstream_details_are_not_exposed(client, use_service):
    use_service(StubService(exc=UpstreamTimeout("https://mirror.internal timed out")))
    resp = client.post("/api/search", json={"query": "anything"})
    assert resp.json()["error"] == "Request timed out. Try a smaller search area."


def test_unexpected_error_is_internal(client, use_service):
    use_service(StubService(exc=RuntimeError("secret stack detail")))
    resp = client.post("/api/search", json={"query": "anything"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "An unexpected error occurred", "code": "INTERNAL_ERROR"}


def test_missing_body_field_reaches_service_as_none(client, use_service):
    service = use_service(StubService(exc=MissingQuery()))
    resp = client.post("/api/search", json={})

    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_QUERY"
    assert service.queries == [None]


def test_malformed_body_is_missing_query(client, use_service):
    use_service(StubService(result=_result()))
    resp = client.post("/api/search", content="not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_QUERY"


def test_search_rejects_get(client):
    resp = client.get("/api/search")
    assert resp.status_code == 405
    assert resp.json()["code"] == "METHOD_NOT_ALLOWED"


def test_nominatim_proxy_forwards_params(client, use_resolver):
    resolver = use_resolver(StubResolver(data=[{"place_id": 1}]))
    resp = client.get("/api/nominatim", params={"endpoint": "search", "q": "pune", "limit": "3"})

    assert resp.status_code == 200
    assert resp.json() == [{"place_id": 1}]
    assert resolver.calls == [("search", {"q": "pune", "limit": "3"})]
    assert "s-maxage=3600" in resp.headers["cache-control"]


def test_nominatim_proxy_rejects_unknown_endpoint(client, use_resolver):
    resolver = use_resolver(StubResolver(data={}))
    resp = client.get("/api/nominatim", params={"endpoint": "details"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_ENDPOINT"
    assert resolver.calls == []


def test_nominatim_proxy_maps_rate_limit(client, use_resolver):
    use_resolver(StubResolver(exc=UpstreamRateLimited("429")))
    resp = client.get("/api/nominatim", params={"q": "pune"})

    assert resp.status_code == 429
    assert resp.json()["code"] == "RATE_LIMITED"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "ok"
