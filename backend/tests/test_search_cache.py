from domain.models import GeoResult, ParsedQuery, SearchResult, SearchStats
from services.search_cache import GeoCache, SearchCache, TTLCache


def _geo(name="Paris"):
    return GeoResult(
        display_name=name,
        lat=48.85,
        lon=2.35,
        bounding_box=(48.8, 48.9, 2.2, 2.4),
        type="city",
        importance=0.9,
        osm_type="relation",
        osm_id=7444,
    )


def _result():
    return SearchResult(results=[], stats=SearchStats(total=0, operators={}, types={}), bounds=None, query=ParsedQuery())


def test_ttl_cache_expires_entries(fake_clock):
    cache = TTLCache(ttl_seconds=10, max_entries=5, clock=fake_clock)
    cache.put("a", 1)
    fake_clock.advance(9)
    assert cache.get("a") == 1
    fake_clock.advance(2)
    assert cache.get("a") is None
    assert len(cache) == 0


def test_ttl_cache_evicts_least_recently_used(fake_clock):
    cache = TTLCache(ttl_seconds=60, max_entries=2, clock=fake_clock)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1  # "b" is now the oldest
    cache.put("c", 3)
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_ttl_cache_zero_ttl_never_expires(fake_clock):
    cache = TTLCache(ttl_seconds=0, max_entries=2, clock=fake_clock)
    cache.put("a", 1)
    fake_clock.advance(10_000)
    assert cache.get("a") == 1


def test_geo_cache_is_keyed_by_text(fake_clock):
    cache = GeoCache(ttl_seconds=60, max_entries=10, clock=fake_clock)
    cache.put_geo_result("paris", _geo())
    assert cache.get_geo_result("paris").display_name == "Paris"
    assert cache.get_geo_result("Paris") is None
    cache.clear()
    assert cache.get_geo_result("paris") is None


def test_search_cache_ignores_raw_text(fake_clock):
    cache = SearchCache(ttl_seconds=60, max_entries=10, clock=fake_clock)
    first = ParsedQuery(type="bank", region="paris", raw="banks in paris")
    second = ParsedQuery(type="bank", region="paris", raw="type:bank region:paris")
    result = _result()

    cache.put_search_result(first, result)
    assert cache.get_search_result(second) is result


def test_search_cache_distinguishes_radius(fake_clock):
    cache = SearchCache(ttl_seconds=60, max_entries=10, clock=fake_clock)
    cache.put_search_result(ParsedQuery(type="bank", near="lyon", radius=10), _result())
    assert cache.get_search_result(ParsedQuery(type="bank", near="lyon", radius=20)) is None
