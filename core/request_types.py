"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProxyRequest:
    """Prepared data for the outbound fetch."""

    method: str
    target_url: str
    headers: list[tuple[str, str]]
    has_body: bool = False
