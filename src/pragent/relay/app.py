"""
Relay application: forwards browser calls to the upstream API.

Every method on the proxy path is forwarded to a fixed upstream origin.
Chat streams are piped through unbuffered; everything else is read fully
and re-emitted as JSON. The relay keeps no state between requests.
"""
import json
import logging
from collections.abc import AsyncIterator

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from .. import __version__
from .config import CORS_HEADERS, PREFLIGHT_MAX_AGE, RelaySettings

logger = logging.getLogger(__name__)

PROXY_ROUTE = "/api/proxy/{path:path}"
PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]
BODYLESS_METHODS = ("GET", "DELETE")
EVENT_STREAM = "text/event-stream"


def create_app(
    settings: RelaySettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Relay settings (default: read from the environment)
        transport: httpx transport for upstream calls (tests pass a mock)
    """
    settings = settings or RelaySettings.from_env()

    app = FastAPI(title="PR Agent Relay", version=__version__)
    app.state.settings = settings

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "pragent-relay",
            "upstream": settings.upstream_url,
        }

    @app.options(PROXY_ROUTE)
    async def preflight(path: str) -> Response:
        """Answer CORS preflight without contacting upstream."""
        return Response(
            status_code=200,
            headers={**CORS_HEADERS, "Access-Control-Max-Age": PREFLIGHT_MAX_AGE},
        )

    @app.api_route(PROXY_ROUTE, methods=PROXY_METHODS)
    async def proxy(request: Request, path: str) -> Response:
        return await forward_request(request, path, settings, transport)

    return app


def build_upstream_url(upstream_url: str, path: str, query: str) -> str:
    """Join the upstream origin, the rejoined path and the raw query string."""
    url = f"{upstream_url.rstrip('/')}/{path.lstrip('/')}"
    return f"{url}?{query}" if query else url


def is_streaming_response(
    path: str,
    upstream: httpx.Response,
    markers: tuple[str, ...],
) -> bool:
    if any(marker in path for marker in markers):
        return True
    return EVENT_STREAM in upstream.headers.get("content-type", "")


async def forward_request(
    request: Request,
    path: str,
    settings: RelaySettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Response:
    """Forward one inbound request and normalize the upstream response."""
    client: httpx.AsyncClient | None = None
    try:
        url = build_upstream_url(settings.upstream_url, path, request.url.query)

        body: bytes | None = None
        if request.method not in BODYLESS_METHODS:
            body = await request.body() or None

        headers = {"Content-Type": "application/json"}
        authorization = request.headers.get("authorization")
        if authorization:
            headers["Authorization"] = authorization

        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout),
            follow_redirects=True,
            transport=transport,
        )
        upstream_request = client.build_request(request.method, url, headers=headers, content=body)
        logger.info("%s %s -> %s", request.method, request.url.path, url)

        upstream = await client.send(upstream_request, stream=True)

        if is_streaming_response(path, upstream, settings.stream_path_markers):
            logger.debug("Streaming %s (status %d)", url, upstream.status_code)
            response = StreamingResponse(
                _pipe(upstream, client),
                status_code=upstream.status_code,
                headers={
                    **CORS_HEADERS,
                    # Not media_type: Starlette would append a charset.
                    "Content-Type": upstream.headers.get("content-type") or EVENT_STREAM,
                    "Cache-Control": "no-cache",
                    "Connection": "keep-alive",
                },
            )
            # The stream generator now owns the client.
            client = None
            return response

        await upstream.aread()
        await upstream.aclose()
        return _buffered_response(upstream)

    except Exception as e:
        logger.exception("Proxy request failed for %s", path)
        return JSONResponse(
            {"detail": "Proxy request failed", "error": type(e).__name__},
            status_code=500,
            headers=CORS_HEADERS,
        )
    finally:
        if client is not None:
            await client.aclose()


def _buffered_response(upstream: httpx.Response) -> Response:
    if upstream.status_code < 200 or upstream.status_code in (204, 304):
        return Response(status_code=upstream.status_code, headers=CORS_HEADERS)

    text = upstream.text
    try:
        data = json.loads(text)
    except ValueError:
        data = text

    return JSONResponse(content=data, status_code=upstream.status_code, headers=CORS_HEADERS)


async def _pipe(upstream: httpx.Response, client: httpx.AsyncClient) -> AsyncIterator[bytes]:
    """Yield upstream chunks as they arrive, then release the connection."""
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    finally:
        await upstream.aclose()
        await client.aclose()
