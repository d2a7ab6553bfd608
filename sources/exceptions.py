class SourceFetchError(Exception):
    """Raised when an upstream feed or listing cannot be fetched or parsed."""


class TooManyRedirects(SourceFetchError):
    """Raised when an upstream keeps redirecting past the configured bound."""
