class RawRelayError(Exception):
    """Base class for all exceptions in rawrelay."""


class ConfigurationError(RawRelayError):
    """Exception raised when a route needs a setting that is not configured."""


class InvalidResourceError(RawRelayError):
    """Exception raised for a file name the relay refuses to serve."""


class FetchError(RawRelayError):
    """Exception raised when the origin could not deliver a resource."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class OriginUnreachableError(FetchError):
    """Connection, network or timeout failure while reaching the origin."""


class OriginRejectedError(FetchError):
    """The origin answered with a status outside 2xx and 304."""

    def __init__(self, url: str, status_code: int, message: str | None = None) -> None:
        super().__init__(url, message or f"Origin returned status {status_code}")
        self.status_code = status_code
