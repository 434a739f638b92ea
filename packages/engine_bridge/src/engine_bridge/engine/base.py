"""
Engine Provider Base

Abstract interface for the event-processing engine.
Implementations: in-memory (development and tests). A production engine is
plugged in through the same interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EngineError(Exception):
    """Error raised by an engine provider."""

    def __init__(
        self,
        message: str,
        event_type: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.event_type = event_type
        self.details = details or {}


class StatementState(str, Enum):
    """Lifecycle states of a registered statement."""

    STARTED = "STARTED"
    STOPPED = "STOPPED"
    FAILED = "FAILED"
    DESTROYED = "DESTROYED"


@dataclass
class Statement:
    """
    A rule/query registered in the engine.

    Attributes:
        name: Statement name, unique per engine
        text: Source definition
        state: Current lifecycle state
        time_last_state_change: Epoch milliseconds of the last state transition
    """

    name: str
    text: str
    state: StatementState
    time_last_state_change: int


class EngineEventResult(ABC):
    """An event emitted by the engine."""

    @property
    @abstractmethod
    def property_names(self) -> list[str]:
        """Property names, in schema order."""
        pass

    @abstractmethod
    def get(self, name: str) -> Any:
        """Return the value of a property."""
        pass


class EngineProvider(ABC):
    """
    Abstract interface for engine providers.

    Implementations must handle:
    - Event type registration
    - Event ingestion (schema conformance is checked here, not by the codec)
    - Statement introspection
    - Shutdown
    """

    @abstractmethod
    def add_event_type(self, name: str, definition: dict[str, type]) -> None:
        """
        Register an event type.

        Args:
            name: Event type name
            definition: Field name -> field type
        """
        pass

    @abstractmethod
    def has_event_type(self, name: str) -> bool:
        """Whether an event type is registered."""
        pass

    @abstractmethod
    def send_event(self, attributes: dict[str, Any], event_type: str) -> None:
        """
        Feed an event into the engine.

        Raises:
            EngineError: unknown event type or event not matching its schema
        """
        pass

    @abstractmethod
    def get_statement(self, name: str) -> Statement | None:
        """Return a statement by name, or None."""
        pass

    @abstractmethod
    def statements(self) -> list[Statement]:
        """Return all registered statements."""
        pass

    @abstractmethod
    def destroy(self) -> None:
        """Shut the engine down and release its resources."""
        pass
