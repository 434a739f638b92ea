"""
Engine Context Lifecycle

One engine provider per container scope (one per running service), created
lazily on first use and destroyed once when the scope ends.

    UNPROVISIONED --acquire--> PROVISIONED --release--> DESTROYED

DESTROYED is terminal for a given EngineContext. acquire() and release() each
run as a single critical section, so concurrent first use creates exactly one
provider and no caller ever sees a half-initialized one.
"""

import logging
import threading
from enum import Enum
from typing import Callable

from engine_bridge.contracts import CANONICAL_EVENT_DEFINITION, IOT_EVENT
from engine_bridge.engine.base import EngineProvider
from engine_bridge.engine.memory import InMemoryEngineProvider

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """States of an engine context."""

    UNPROVISIONED = "unprovisioned"
    PROVISIONED = "provisioned"
    DESTROYED = "destroyed"


class EngineContextDestroyed(RuntimeError):
    """acquire() was called on a context whose scope has already ended."""


class EngineContext:
    """
    Scope-bound holder of the shared engine provider.

    Args:
        provider_factory: Creates a new provider (called at most once)
        configure: Optional hook run on the new provider after the canonical
            event type is registered, inside the same critical section
    """

    def __init__(
        self,
        provider_factory: Callable[[], EngineProvider] = InMemoryEngineProvider,
        configure: Callable[[EngineProvider], None] | None = None,
    ):
        self._provider_factory = provider_factory
        self._configure = configure
        self._lock = threading.Lock()
        self._provider: EngineProvider | None = None
        self._state = LifecycleState.UNPROVISIONED

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def provider(self) -> EngineProvider | None:
        """The provisioned provider, or None."""
        return self._provider

    def acquire(self) -> EngineProvider:
        """
        Return the scope's provider, creating it on first use.

        Raises:
            EngineContextDestroyed: the scope has already been released
        """
        with self._lock:
            if self._state == LifecycleState.PROVISIONED:
                return self._provider
            if self._state == LifecycleState.DESTROYED:
                raise EngineContextDestroyed("Engine context has been destroyed")

            provider = self._provider_factory()
            try:
                provider.add_event_type(IOT_EVENT, CANONICAL_EVENT_DEFINITION)
                if self._configure is not None:
                    self._configure(provider)
            except Exception:
                logger.error("Engine provisioning failed, discarding provider", exc_info=True)
                provider.destroy()
                raise

            self._provider = provider
            self._state = LifecycleState.PROVISIONED
            logger.info(
                f"Engine provisioned with event type {IOT_EVENT}",
                extra={"provider": type(provider).__name__},
            )
            return provider

    def release(self) -> None:
        """
        Destroy the provider if there is one. Repeated calls are no-ops.
        """
        with self._lock:
            if self._state == LifecycleState.DESTROYED:
                logger.debug("Engine context already destroyed")
                return

            provider = self._provider
            self._provider = None
            self._state = LifecycleState.DESTROYED

            if provider is None:
                logger.debug("Engine context released without being provisioned")
                return

            try:
                provider.destroy()
            except Exception as e:
                logger.error(f"Engine shutdown failed: {e}", exc_info=True)
                return
            logger.info("Engine destroyed")
