"""Exceptions raised by urlshare."""


class UrlShareError(Exception):
    """Base exception for all urlshare errors."""

    code: str = "URLSHARE-UNKNOWN"


class InvalidUrlError(UrlShareError, ValueError):
    """Raised when a string cannot be parsed as an absolute URL."""

    code = "URLSHARE-URL"

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message if message is not None else f"not an absolute URL: {url!r}")
        self.url: str = url


class InvalidParameterError(UrlShareError, ValueError):
    """Raised when a parameter string or argument cannot be decoded."""

    code = "URLSHARE-PARAMETER"


class ConfigurationError(UrlShareError):
    code = "URLSHARE-CONFIG"
