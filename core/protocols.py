"""Shared protocol definitions."""

from typing import Protocol


class PathStrategy(Protocol):
    """Protocol for recovering the encoded target segment from a request path."""

    def extract(self, path: str) -> str: ...


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_proxied(self, method: str, target: str, status: int) -> None: ...
    def log_fallback(self, path: str) -> None: ...
    def log_error(self, target: str, status: int, message: str) -> None: ...
