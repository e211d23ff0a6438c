"""Header handling for the outbound fetch and the relayed response."""

from collections.abc import Iterable

from core.config import HeaderSettings

HeaderList = list[tuple[str, str]]

# Connection-level headers owned by the transport on each leg
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-connection",
        "transfer-encoding",
        "te",
        "trailer",
        "upgrade",
    }
)


class HeaderBuilder:
    """Build upstream request headers and sanitize upstream response headers."""

    def __init__(self, settings: HeaderSettings | None = None) -> None:
        settings = settings or HeaderSettings()
        self.strip = frozenset(name.lower() for name in settings.strip)
        self.allow_origin = settings.allow_origin

    def build_upstream_headers(self, headers: Iterable[tuple[str, str]]) -> HeaderList:
        """Copy inbound headers in order, duplicates and auth headers included.

        Host is left to the transport so it matches the target URL.
        """
        return [
            (key, value)
            for key, value in headers
            if key.lower() != "host" and key.lower() not in HOP_BY_HOP
        ]

    def sanitize_response_headers(self, headers: Iterable[tuple[str, str]]) -> HeaderList:
        """Drop embedding restrictions and add the cross-origin header."""
        sanitized = [
            (key, value)
            for key, value in headers
            if key.lower() not in self.strip
            and key.lower() not in HOP_BY_HOP
            and key.lower() != "access-control-allow-origin"
        ]
        sanitized.append(("Access-Control-Allow-Origin", self.allow_origin))
        return sanitized


def has_body(headers: Iterable[tuple[str, str]]) -> bool:
    """Whether the inbound request announces a body."""
    for key, value in headers:
        key_lower = key.lower()
        if key_lower == "transfer-encoding":
            return True
        if key_lower == "content-length":
            try:
                return int(value) > 0
            except ValueError:
                return False
    return False
