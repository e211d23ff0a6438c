"""HTTP proxying utilities for upstream requests."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import suppress

import httpx
from fastapi import Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from starlette.requests import ClientDisconnect

from core.exceptions import (
    ClientDisconnected,
    ProxyError,
    UpstreamFetchError,
    UpstreamTimeoutError,
)
from core.headers import HeaderBuilder
from core.request_types import ProxyRequest


class UpstreamClient:
    """Fetch the target with a single streamed attempt and relay the response."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        header_builder: HeaderBuilder,
    ) -> None:
        self._client = client
        self._headers = header_builder

    async def fetch(self, prepared: ProxyRequest, request: Request) -> httpx.Response:
        """Send the prepared request, abandoning it if the caller goes away.

        Returns the upstream response opened in streaming mode. The caller owns
        it and must close it (``relay`` does).
        """
        body_done = asyncio.Event()
        content = None
        if prepared.has_body:
            content = self._forward_body(request, body_done)
        else:
            body_done.set()

        upstream_request = self._client.build_request(
            prepared.method,
            prepared.target_url,
            headers=prepared.headers,
            content=content,
        )

        send = asyncio.create_task(self._send(upstream_request, prepared.target_url))
        watcher = asyncio.create_task(self._wait_for_disconnect(request, body_done))
        done = set()
        try:
            done, _ = await asyncio.wait(
                {send, watcher}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            watcher.cancel()
            with suppress(asyncio.CancelledError):
                await watcher
            if send not in done:
                send.cancel()
                await self._discard(send)

        if send in done:
            return send.result()
        raise ClientDisconnected(prepared.target_url)

    def relay(self, response: httpx.Response) -> StreamingResponse:
        """Stream the upstream body through untouched with sanitized headers.

        A response whose body was already read is relayed from its buffer.
        """
        if response.is_stream_consumed:
            body = _buffered(response.content)
        else:
            body = response.aiter_raw()
        relayed = StreamingResponse(
            body,
            status_code=response.status_code,
            background=BackgroundTask(self._cleanup_streaming, response),
        )
        for key, value in self._headers.sanitize_response_headers(
            response.headers.multi_items()
        ):
            relayed.headers.append(key, value)
        return relayed

    async def _send(self, upstream_request: httpx.Request, target: str) -> httpx.Response:
        """Single attempt, no retry. Transport errors become proxy errors."""
        try:
            return await self._client.send(upstream_request, stream=True)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(_describe(e), target) from e
        except (httpx.RequestError, httpx.StreamError) as e:
            raise UpstreamFetchError(_describe(e), target) from e
        except ClientDisconnect as e:
            raise ClientDisconnected(target) from e

    async def _forward_body(
        self, request: Request, body_done: asyncio.Event
    ) -> AsyncIterator[bytes]:
        """Pass inbound body chunks through without buffering."""
        try:
            async for chunk in request.stream():
                if chunk:
                    yield chunk
        finally:
            body_done.set()

    async def _wait_for_disconnect(self, request: Request, body_done: asyncio.Event) -> None:
        """Return once the caller disconnects.

        Only reads from the connection after the body has been forwarded so no
        body chunk is lost.
        """
        await body_done.wait()
        while True:
            message = await request.receive()
            if message["type"] == "http.disconnect":
                return

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()

    async def _discard(self, send: "asyncio.Task[httpx.Response]") -> None:
        """Wait for an abandoned send to unwind, closing it if it got through."""
        try:
            response = await send
        except (asyncio.CancelledError, ProxyError):
            return
        await response.aclose()


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


async def _buffered(content: bytes) -> AsyncIterator[bytes]:
    yield content
