"""Custom exception hierarchy for the proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class MissingTarget(ProxyError):
    """The request path carries no target URL at all.

    Not a failure: the handler answers with the fallback page.
    """


class DecodeError(ProxyError):
    """The target segment contains an invalid percent-escape sequence."""


class InvalidTargetError(ProxyError):
    """The decoded target is empty or does not use http/https."""


class UpstreamFetchError(ProxyError):
    """Raised when the target could not be fetched.

    Attributes:
        message: Underlying transport error message
        target: Target URL of the failed fetch (optional)
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.target = target


class UpstreamTimeoutError(UpstreamFetchError):
    """Raised when the upstream fetch exceeds the configured timeout."""


class ClientDisconnected(ProxyError):
    """The caller closed the connection before the upstream fetch completed."""
