"""FastAPI route handlers."""

import re

from fastapi import Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse, StreamingResponse

from core.config import Config
from core.exceptions import (
    ClientDisconnected,
    DecodeError,
    InvalidTargetError,
    MissingTarget,
    UpstreamFetchError,
    UpstreamTimeoutError,
)
from core.protocols import RequestLogger
from ui.fallback import render_fallback_page
from ui.log_utils import write_incoming_log

# nginx's "client closed request"; never reaches the caller
CLIENT_CLOSED_REQUEST = 499

_NON_ASCII = re.compile(rb"[\x80-\xff]")


def _raw_path(request: Request) -> str:
    """Path as received on the wire, still percent-encoded, without the query.

    Bytes sent unencoded outside ASCII are percent-encoded the way a URL
    parser would, so they decode back to the same UTF-8 text.
    """
    raw = request.scope.get("raw_path")
    if raw is None:
        return request.url.path
    raw = _NON_ASCII.sub(lambda m: b"%%%02X" % m.group()[0], raw.split(b"?", 1)[0])
    return raw.decode("ascii")


def _fallback(request: Request, config: Config) -> HTMLResponse:
    home_url = None
    if config.routing.mode == "prefix":
        home_url = f"{request.url.scheme}://{request.url.netloc}/"
    return HTMLResponse(render_fallback_page(home_url), status_code=200)


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response | StreamingResponse:
    """Proxy any request whose path encodes a target URL.

    Every failure is converted into a response here; nothing escapes.
    """
    raw_path = _raw_path(request)
    headers = [
        (key.decode("latin-1"), value.decode("latin-1"))
        for key, value in request.headers.raw
    ]

    proxy_service = request.app.state.proxy_service
    try:
        prepared = proxy_service.prepare(request.method, raw_path, headers)
    except MissingTarget:
        logger.log_fallback(raw_path)
        return _fallback(request, config)
    except (DecodeError, InvalidTargetError) as e:
        logger.log_error(raw_path, 400, str(e))
        return PlainTextResponse(str(e), status_code=400)

    if config.proxy.debug:
        write_incoming_log(request.method, raw_path, dict(request.headers), prepared.target_url)

    upstream = request.app.state.upstream_client
    try:
        response = await upstream.fetch(prepared, request)
    except UpstreamTimeoutError as e:
        logger.log_error(prepared.target_url, 504, e.message)
        return PlainTextResponse(f"Upstream timeout: {e.message}", status_code=504)
    except UpstreamFetchError as e:
        logger.log_error(prepared.target_url, 500, e.message)
        return PlainTextResponse(f"Failed to fetch target URL: {e.message}", status_code=500)
    except ClientDisconnected:
        logger.log_error(prepared.target_url, CLIENT_CLOSED_REQUEST, "Client disconnected")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    logger.log_proxied(request.method, prepared.target_url, response.status_code)
    return upstream.relay(response)
