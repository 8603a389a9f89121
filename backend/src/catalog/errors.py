"""Errors raised while retrieving or storing the catalog."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class FetchError(CatalogError):
    """The remote catalog could not be retrieved."""


class TransportError(FetchError):
    """Connection failure or timeout."""


class HttpError(FetchError):
    """Non-2xx answer from the catalog source."""

    def __init__(self, status: int, url: str | None = None):
        self.status = status
        self.url = url
        super().__init__(f"Invalid server response (HTTP {status})")


class DecodeError(FetchError):
    """Payload is not a valid catalog."""


class CacheWriteError(CatalogError):
    """The catalog snapshot could not be written."""
