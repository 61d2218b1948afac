import os

# Basic settings helper to read environment configuration.

DEFAULT_OVERPASS_ENDPOINTS = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://overpass.private.coffee/api/interpreter",
)


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_list(val: str | None, default: tuple[str, ...]) -> list[str]:
    if not val:
        return list(default)
    return [item.strip() for item in val.split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        self.NOMINATIM_BASE_URL: str = os.getenv(
            "NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org"
        ).rstrip("/")
        self.NOMINATIM_USER_AGENT: str | None = os.getenv("NOMINATIM_USER_AGENT")
        self.NOMINATIM_REFERER: str | None = os.getenv("NOMINATIM_REFERER")
        self.NOMINATIM_MIN_INTERVAL: float = float(os.getenv("NOMINATIM_MIN_INTERVAL", "1.0"))
        self.NOMINATIM_TIMEOUT: float = float(os.getenv("NOMINATIM_TIMEOUT", "10"))
        self.NOMINATIM_RESULT_LIMIT: int = int(os.getenv("NOMINATIM_RESULT_LIMIT", "5"))

        self.OVERPASS_ENDPOINTS: list[str] = _as_list(
            os.getenv("OVERPASS_ENDPOINTS"), DEFAULT_OVERPASS_ENDPOINTS
        )
        self.OVERPASS_TIMEOUT: float = float(os.getenv("OVERPASS_TIMEOUT", "30"))
        self.OVERPASS_MAX_RESULTS: int = int(os.getenv("OVERPASS_MAX_RESULTS", "1000"))

        # "relevant" keeps an allow-list of tag keys, "full" keeps every tag
        self.ASSET_TAGS_MODE: str = os.getenv("ASSET_TAGS_MODE", "relevant").lower()

        self.GEO_CACHE_TTL_SECONDS: int = int(os.getenv("GEO_CACHE_TTL_SECONDS", str(24 * 3600)))
        self.GEO_CACHE_MAX_ENTRIES: int = int(os.getenv("GEO_CACHE_MAX_ENTRIES", "512"))
        self.SEARCH_CACHE_TTL_SECONDS: int = int(os.getenv("SEARCH_CACHE_TTL_SECONDS", "3600"))
        self.SEARCH_CACHE_MAX_ENTRIES: int = int(os.getenv("SEARCH_CACHE_MAX_ENTRIES", "256"))
        self.SEARCH_CACHE_ENABLED: bool = _as_bool(os.getenv("SEARCH_CACHE_ENABLED"), True)

        self.MAX_QUERY_LENGTH: int = int(os.getenv("MAX_QUERY_LENGTH", "500"))
        self.CORS_ALLOW_ORIGINS: list[str] = _as_list(os.getenv("CORS_ALLOW_ORIGINS"), ("*",))


settings = Settings()
