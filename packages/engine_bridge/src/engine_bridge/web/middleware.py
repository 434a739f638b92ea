"""Correlation middleware and request helpers."""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from basecore import correlation
from basecore.settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Middleware that opens a correlation context for every request.

    Sets request.state attributes:
    - correlation: CorrelationContext for this request

    The correlator id is echoed back in the response headers.
    """

    def __init__(self, app: ASGIApp, header_name: str | None = None):
        super().__init__(app)
        self.header_name = header_name or get_settings().CORRELATOR_HEADER

    async def dispatch(self, request: Request, call_next) -> Response:
        context = correlation.begin(request.headers.get(self.header_name))
        request.state.correlation = context
        try:
            logger.debug(f"{request.method} {request.url.path}")
            response = await call_next(request)
            response.headers[self.header_name] = context.correlator_id
            return response
        finally:
            correlation.clear()


async def read_body_as_text(request: Request) -> str:
    """
    Read the whole request body as text.

    Uses the charset declared in Content-Type, UTF-8 when none is given.
    """
    charset = DEFAULT_CHARSET
    content_type = request.headers.get("content-type", "")
    for param in content_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            charset = value.strip('"')
    logger.debug(f"request character encoding {charset}")

    body = await request.body()
    try:
        return body.decode(charset)
    except LookupError:
        logger.warning(f"Unknown charset {charset}, falling back to {DEFAULT_CHARSET}")
        return body.decode(DEFAULT_CHARSET)
