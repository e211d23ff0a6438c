"""Tests for header handling."""

import pytest

from core.config import HeaderSettings
from core.headers import HeaderBuilder, has_body


class TestBuildUpstreamHeaders:
    """Tests for outbound header copying."""

    def test_copies_in_order_with_duplicates(self):
        builder = HeaderBuilder()
        headers = [
            ("Authorization", "Bearer x"),
            ("Accept", "text/html"),
            ("X-Dup", "1"),
            ("X-Dup", "2"),
        ]
        assert builder.build_upstream_headers(headers) == headers

    def test_drops_host_and_hop_by_hop(self):
        builder = HeaderBuilder()
        headers = [
            ("Host", "proxy.local"),
            ("Connection", "keep-alive"),
            ("Transfer-Encoding", "chunked"),
            ("Upgrade", "h2c"),
            ("Cookie", "a=1"),
        ]
        assert builder.build_upstream_headers(headers) == [("Cookie", "a=1")]


class TestSanitizeResponseHeaders:
    """Tests for response header sanitization."""

    def test_strips_case_insensitively(self):
        builder = HeaderBuilder()
        sanitized = builder.sanitize_response_headers(
            [
                ("CONTENT-SECURITY-POLICY", "default-src 'self'"),
                ("x-frame-options", "DENY"),
                ("Content-Type", "text/html"),
            ]
        )
        assert sanitized == [
            ("Content-Type", "text/html"),
            ("Access-Control-Allow-Origin", "*"),
        ]

    def test_keeps_cookies_and_caching(self):
        builder = HeaderBuilder()
        sanitized = builder.sanitize_response_headers(
            [
                ("Set-Cookie", "a=1; Domain=example.com"),
                ("Set-Cookie", "b=2"),
                ("ETag", '"abc"'),
                ("Content-Encoding", "gzip"),
                ("Content-Length", "10"),
            ]
        )
        assert sanitized[:5] == [
            ("Set-Cookie", "a=1; Domain=example.com"),
            ("Set-Cookie", "b=2"),
            ("ETag", '"abc"'),
            ("Content-Encoding", "gzip"),
            ("Content-Length", "10"),
        ]

    def test_drops_framing_headers(self):
        sanitized = HeaderBuilder().sanitize_response_headers(
            [("Transfer-Encoding", "chunked"), ("Connection", "close")]
        )
        assert sanitized == [("Access-Control-Allow-Origin", "*")]

    def test_replaces_upstream_allow_origin(self):
        sanitized = HeaderBuilder().sanitize_response_headers(
            [("access-control-allow-origin", "https://a.com")]
        )
        assert sanitized == [("Access-Control-Allow-Origin", "*")]

    def test_configured_strip_list(self):
        builder = HeaderBuilder(
            HeaderSettings(strip=["X-Frame-Options", "Referrer-Policy"], allow_origin="https://app")
        )
        sanitized = builder.sanitize_response_headers(
            [
                ("content-security-policy", "default-src 'self'"),
                ("x-frame-options", "DENY"),
                ("referrer-policy", "no-referrer"),
            ]
        )
        assert sanitized == [
            ("content-security-policy", "default-src 'self'"),
            ("Access-Control-Allow-Origin", "https://app"),
        ]


class TestHasBody:
    """Tests for inbound body detection."""

    @pytest.mark.parametrize(
        "headers,expected",
        [
            ([], False),
            ([("content-length", "0")], False),
            ([("Content-Length", "12")], True),
            ([("content-length", "nope")], False),
            ([("Transfer-Encoding", "chunked")], True),
        ],
    )
    def test_detection(self, headers, expected):
        assert has_body(headers) is expected
