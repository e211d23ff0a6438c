"""FastAPI application factory."""

from contextlib import asynccontextmanager
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.paths import build_strategy
from core.protocols import RequestLogger
from services.proxy_service import ProxyService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        header_builder = HeaderBuilder(config.headers)
        client = httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=config.upstream.max_redirects,
            timeout=config.upstream.timeout,
            transport=transport,
            cookies=_refusing_cookie_jar(),
        )
        app.state.proxy_service = ProxyService(
            strategy=build_strategy(config.routing),
            header_builder=header_builder,
        )
        app.state.upstream_client = UpstreamClient(client, header_builder)
        try:
            yield
        finally:
            await client.aclose()

    # No docs routes: every path belongs to the proxy
    app = FastAPI(
        title="PROXX",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    async def proxy(request: Request):
        return await handle_proxy(request, config, logger)

    # methods=None matches every verb, WebDAV and custom ones included
    app.add_route("/{path:path}", proxy, methods=None)

    return app


def _refusing_cookie_jar() -> CookieJar:
    """Cookie jar that never stores anything.

    Upstream cookies reach the caller only through the relayed Set-Cookie.
    """
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
