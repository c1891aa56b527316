from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from picserver.analysis.analyzer import Analyzer
from picserver.analysis.models import UploadRequest

ANALYZE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def declared_length(request: Request) -> int | None:
    """Parse Content-Length; None when absent, chunked or unusable."""
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        length = int(raw)
    except ValueError:
        return None
    return length if length >= 0 else None


async def body_chunks(request: Request) -> AsyncIterator[bytes]:
    """Stream the request body, reporting a client disconnect as an OSError."""
    try:
        async for chunk in request.stream():
            if chunk:
                yield chunk
    except ClientDisconnect as exc:
        raise ConnectionResetError("Client disconnected during upload") from exc


def create_app(analyzer: Analyzer) -> FastAPI:
    """Build the HTTP application around an Analyzer.

    Every path reaches the analyzer, so the built-in documentation routes are
    disabled. The response is always HTTP 200 with a JSON Verdict.
    """
    app = FastAPI(title="picserver", docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route("/{path:path}", methods=ANALYZE_METHODS)
    async def analyze(request: Request) -> JSONResponse:
        client = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        upload = UploadRequest(
            path=request.scope["path"],
            declared_length=declared_length(request),
            content_type=request.headers.get("content-type", ""),
            byte_stream=body_chunks(request),
            client=client,
        )
        verdict = await analyzer.analyze(upload)
        return JSONResponse(verdict.to_dict())

    return app
