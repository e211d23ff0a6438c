"""Forwarding request construction."""

import httpx

from core.exceptions import InvalidTargetError
from core.headers import HeaderBuilder, has_body
from core.protocols import PathStrategy
from core.request_types import ProxyRequest
from core.target import INVALID_TARGET_MESSAGE, resolve_target


class ProxyService:
    """Turn an inbound request into a prepared outbound fetch."""

    def __init__(
        self,
        strategy: PathStrategy,
        header_builder: HeaderBuilder,
    ) -> None:
        self._strategy = strategy
        self._headers = header_builder

    def prepare(
        self,
        method: str,
        raw_path: str,
        headers: list[tuple[str, str]],
    ) -> ProxyRequest:
        """Prepare the outbound request for ``raw_path``.

        Raises MissingTarget, DecodeError or InvalidTargetError; the caller
        decides how each becomes a response.
        """
        target_url = resolve_target(self._strategy, raw_path)
        try:
            httpx.URL(target_url)
        except httpx.InvalidURL as e:
            raise InvalidTargetError(f"{INVALID_TARGET_MESSAGE} ({e})") from e

        return ProxyRequest(
            method=method,
            target_url=target_url,
            headers=self._headers.build_upstream_headers(headers),
            has_body=has_body(headers),
        )
