import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


class FakeClock:
    """Manually advanced clock; `sleep` advances it and records the delay."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_default_singletons(monkeypatch):
    """Keep module-level default caches/clients from leaking between tests."""
    from services import geocoding, overpass_client, search_cache, search_pipeline

    monkeypatch.setattr(search_cache, "_default_geo_cache", None)
    monkeypatch.setattr(search_cache, "_default_search_cache", None)
    monkeypatch.setattr(geocoding, "_default_location_resolver", None)
    monkeypatch.setattr(overpass_client, "_default_executor", None)
    monkeypatch.setattr(search_pipeline, "_default_search_service", None)
