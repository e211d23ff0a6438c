"""Target URL decoding and validation."""

import re
from urllib.parse import unquote_to_bytes

from core.exceptions import DecodeError, InvalidTargetError
from core.protocols import PathStrategy

ALLOWED_PREFIXES = ("http://", "https://")

DECODE_ERROR_MESSAGE = "Invalid URL encoding."
INVALID_TARGET_MESSAGE = "Invalid target URL format. Must start with http:// or https://"

# A '%' not followed by exactly two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_target(segment: str) -> str:
    """Strictly percent-decode a path segment.

    Unlike ``urllib.parse.unquote``, malformed escapes are rejected instead of
    being passed through, and the decoded bytes must form valid UTF-8.

    Raises:
        DecodeError: On a stray ``%`` or an escape sequence that is not UTF-8.
    """
    if _BAD_ESCAPE.search(segment):
        raise DecodeError(DECODE_ERROR_MESSAGE)
    try:
        return unquote_to_bytes(segment).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(DECODE_ERROR_MESSAGE) from e


def validate_target(url: str) -> str:
    """Return ``url`` unchanged if it is a non-empty http(s) URL."""
    if not url or not url.startswith(ALLOWED_PREFIXES):
        raise InvalidTargetError(INVALID_TARGET_MESSAGE)
    return url


def resolve_target(strategy: PathStrategy, raw_path: str) -> str:
    """Extract, decode and validate the target URL carried by ``raw_path``."""
    segment = strategy.extract(raw_path)
    return validate_target(decode_target(segment))
