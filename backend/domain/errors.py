"""Error taxonomy for the search pipeline.

Each error carries the wire `code` and the HTTP status class the API layer
responds with. `to_dict()` is the `{error, code}` body sent to callers.
"""


class SightlineError(Exception):
    """Base exception for all search pipeline errors."""

    code = "INTERNAL_ERROR"
    status_code = 500
    # Shown instead of `message` when the detail is not meant for callers
    public_message: str | None = None

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.public_message or self.message, "code": self.code}


class MissingQuery(SightlineError):
    code = "MISSING_QUERY"
    status_code = 400

    def __init__(self):
        super().__init__("Query parameter is required")


class QueryTooLong(SightlineError):
    code = "QUERY_TOO_LONG"
    status_code = 400

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Query too long ({length} > {limit} characters)")


class InvalidQuery(SightlineError):
    """The parsed query failed validation; the message says which half is missing."""

    code = "INVALID_QUERY"
    status_code = 400


class MissingLocation(SightlineError):
    code = "MISSING_LOCATION"
    status_code = 400

    def __init__(self):
        super().__init__("Geographic scope is required")


class LocationNotFound(SightlineError):
    code = "LOCATION_NOT_FOUND"
    status_code = 400

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Could not resolve location: {location}")


class InsufficientFilters(SightlineError):
    code = "INSUFFICIENT_FILTERS"
    status_code = 400

    def __init__(self):
        super().__init__("Either asset type or operator must be specified")


class UpstreamError(SightlineError):
    """Base class for failures of the geocoder or the Overpass mirrors."""

    code = "UPSTREAM_ERROR"
    status_code = 502

    def __init__(self, message: str, endpoint: str | None = None):
        self.endpoint = endpoint
        super().__init__(message)


class UpstreamRateLimited(UpstreamError):
    code = "RATE_LIMITED"
    status_code = 429
    public_message = "Service temporarily unavailable. Please try again in a moment."


class UpstreamTimeout(UpstreamError):
    code = "TIMEOUT"
    status_code = 504
    public_message = "Request timed out. Try a smaller search area."


class UpstreamUnavailable(UpstreamError):
    """Non-success status or transport failure from an upstream service."""

    public_message = "Upstream service unavailable. Please try again later."


class InternalError(SightlineError):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self):
        super().__init__("An unexpected error occurred")
