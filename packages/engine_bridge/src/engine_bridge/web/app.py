"""
Engine Bridge Service

FastAPI app that feeds events into the engine and exposes statement
introspection.

The app's lifespan is the container scope of the engine context: the
context object is created at startup but the engine itself is only
provisioned on first use, and released when the app shuts down. The app
also owns the thread pool that delivers actions; it is drained after the
engine is released.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Depends, FastAPI, HTTPException, Request

from basecore import correlation
from basecore.logging import setup_logging
from basecore.settings import Settings, get_settings
from engine_bridge.codec import CodecError, decode_json, encode_statement
from engine_bridge.contracts import IOT_EVENT
from engine_bridge.engine import (
    EngineContext,
    EngineContextDestroyed,
    EngineError,
    EngineProvider,
    InMemoryEngineProvider,
)
from engine_bridge.web.middleware import CorrelationMiddleware, read_body_as_text

logger = logging.getLogger(__name__)


def get_engine(request: Request) -> EngineProvider:
    """Dependency returning the scope's engine, provisioning it on first use."""
    context: EngineContext = request.app.state.engine_context
    try:
        return context.acquire()
    except EngineContextDestroyed:
        raise HTTPException(status_code=503, detail="Engine is shutting down")


def create_app(
    settings: Settings | None = None,
    provider_factory: Callable[[], EngineProvider] = InMemoryEngineProvider,
    configure: Callable[[EngineProvider, Executor], None] | None = None,
) -> FastAPI:
    """
    Build the service.

    Args:
        settings: Service settings (defaults to get_settings())
        provider_factory: Engine provider factory
        configure: Hook run once on the engine when it is provisioned; it gets
            the app's action executor for wiring ActionListeners
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        executor = ThreadPoolExecutor(
            max_workers=settings.ACTION_WORKERS,
            thread_name_prefix="action",
        )
        app.state.action_executor = executor

        def configure_engine(provider: EngineProvider) -> None:
            configure(provider, executor)

        app.state.engine_context = EngineContext(
            provider_factory,
            configure=configure_engine if configure else None,
        )
        logger.info(f"{settings.SERVICE_NAME} started")
        try:
            yield
        finally:
            app.state.engine_context.release()
            executor.shutdown(wait=True)
            logger.info(f"{settings.SERVICE_NAME} stopped")

    app = FastAPI(
        title="Engine Bridge",
        description="Bridges the event-processing engine with external systems",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationMiddleware, header_name=settings.CORRELATOR_HEADER)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": settings.SERVICE_NAME}

    @app.post("/events")
    async def receive_event(request: Request, engine: EngineProvider = Depends(get_engine)):
        """
        Feed a JSON event into the engine.

        Flow:
        1. Read the body as text (UTF-8 unless declared otherwise)
        2. Decode to an attribute map
        3. Send to the engine under the request's correlation context
        """
        text = await read_body_as_text(request)
        try:
            attributes = decode_json(text)
        except CodecError as e:
            logger.warning(f"Rejected event: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        # Listeners fire synchronously inside send_event; bind explicitly so
        # they capture this request's ids whatever thread runs this handler.
        with correlation.bound(request.state.correlation):
            try:
                engine.send_event(attributes, IOT_EVENT)
            except EngineError as e:
                logger.warning(f"Engine rejected event: {e}", extra={"details": e.details})
                raise HTTPException(status_code=400, detail=str(e))

        logger.info("Event accepted", extra={"event_id": attributes.get("id")})
        return {"status": "accepted"}

    @app.get("/statements")
    def list_statements(engine: EngineProvider = Depends(get_engine)):
        """List registered statements."""
        return [encode_statement(st) for st in engine.statements()]

    @app.get("/statements/{name}")
    def get_statement(name: str, engine: EngineProvider = Depends(get_engine)):
        """Return one statement summary."""
        summary = encode_statement(engine.get_statement(name))
        if summary is None:
            raise HTTPException(status_code=404, detail=f"Statement {name} not found")
        return summary

    return app
