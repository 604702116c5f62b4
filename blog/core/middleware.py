import logging
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

from .config import Middleware
from .validation import validate_tracking_id


logger = logging.getLogger(__name__)

GTAG_SNIPPET = (
    '<script async src="https://www.googletagmanager.com/gtag/js?id={id}"></script>\n'
    "<script>window.dataLayer = window.dataLayer || [];"
    "function gtag(){{dataLayer.push(arguments);}}"
    "gtag('js', new Date());"
    "gtag('config', '{id}');</script>\n"
)


def request_id_for(request: Request) -> str:
    return f"{int(time.time() * 1000)}-{id(request)}"


def ga(tracking_id: str) -> Middleware:
    """Build a middleware that adds Google Analytics (gtag.js) to HTML pages."""
    validate_tracking_id(tracking_id)
    snippet = GTAG_SNIPPET.format(id=tracking_id).encode("utf-8")

    async def google_analytics(request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        if not response.headers.get("content-type", "").startswith("text/html"):
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        if b"</head>" in body:
            body = body.replace(b"</head>", snippet + b"</head>", 1)
        else:
            body += snippet

        rewritten = Response(
            content=body,
            status_code=response.status_code,
            background=getattr(response, "background", None),
        )
        # raw_headers keeps repeated headers such as Set-Cookie
        rewritten.raw_headers = [
            (name, value) for name, value in response.raw_headers if name.lower() != b"content-length"
        ] + [(b"content-length", str(len(body)).encode("latin-1"))]
        return rewritten

    return google_analytics


async def log_requests(request: Request, call_next: Callable):
    start_time = time.time()
    request_id = request_id_for(request)

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        # Only log slow requests (>1s) or errors
        if process_time > 1.0 or response.status_code >= 400:
            logger.info(f"[{request_id}] {request.method} {request.url.path} - {response.status_code} - {process_time:.2f}s")
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"[{request_id}] {request.method} {request.url.path} - ERROR: {str(e)} - {process_time:.2f}s")
        raise


async def global_exception_handler(request: Request, exc: Exception):
    request_id = request_id_for(request)
    logger.error(f"[{request_id}] Unhandled exception in {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return PlainTextResponse("Internal server error", status_code=500)
