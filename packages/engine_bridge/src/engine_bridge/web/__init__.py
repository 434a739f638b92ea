"""
HTTP surface - FastAPI app, correlation middleware and request helpers.
"""

from engine_bridge.web.app import create_app
from engine_bridge.web.middleware import CorrelationMiddleware, read_body_as_text

__all__ = ["CorrelationMiddleware", "create_app", "read_body_as_text"]
