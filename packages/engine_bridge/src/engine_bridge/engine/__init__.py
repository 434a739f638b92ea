"""
Engine layer - provider contracts, in-memory provider and context lifecycle.
"""

from engine_bridge.engine.base import (
    EngineError,
    EngineEventResult,
    EngineProvider,
    Statement,
    StatementState,
)
from engine_bridge.engine.lifecycle import EngineContext, EngineContextDestroyed, LifecycleState
from engine_bridge.engine.memory import InMemoryEngineProvider, MapEventResult

__all__ = [
    "EngineContext",
    "EngineContextDestroyed",
    "EngineError",
    "EngineEventResult",
    "EngineProvider",
    "InMemoryEngineProvider",
    "LifecycleState",
    "MapEventResult",
    "Statement",
    "StatementState",
]
