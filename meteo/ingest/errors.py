"""Error taxonomy for OpenWeatherMap fetches."""


class MeteoError(Exception):
    """Base class for fetch failures."""


class NetworkError(MeteoError):
    """Raised on connectivity failures, timeouts and non-2xx responses."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code


class DecodeError(MeteoError):
    """Raised when a 2xx body does not have the expected JSON shape."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class InvalidInputError(MeteoError):
    """Raised before any I/O when the requested city is empty."""
