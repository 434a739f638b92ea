"""
In-Memory Engine Provider

Development provider that keeps everything in process.

- Registers event types and checks incoming events against them
- Statements are pass-through subscriptions on an event type; their text is
  stored for introspection only
- Listeners are called synchronously, on the thread that sent the event
"""

import logging
import threading
import time
from typing import Any, Callable

from engine_bridge.engine.base import (
    EngineError,
    EngineEventResult,
    EngineProvider,
    Statement,
    StatementState,
)

logger = logging.getLogger(__name__)

Listener = Callable[[list[EngineEventResult]], Any]


def _now_ms() -> int:
    return int(time.time() * 1000)


class MapEventResult(EngineEventResult):
    """
    Event result backed by an attribute map.

    Declared properties come first, in definition order, followed by any
    extra attributes the event carried.
    """

    def __init__(self, event_type: str, definition: dict[str, type], attributes: dict[str, Any]):
        self.event_type = event_type
        self._attributes = attributes
        self._names = list(definition) + [k for k in attributes if k not in definition]

    @property
    def property_names(self) -> list[str]:
        return list(self._names)

    def get(self, name: str) -> Any:
        if name not in self._names:
            raise KeyError(f"Property {name} is not valid for event type {self.event_type}")
        return self._attributes.get(name)


class _Subscription:
    def __init__(self, statement: Statement, event_type: str):
        self.statement = statement
        self.event_type = event_type
        self.listeners: list[Listener] = []


class InMemoryEngineProvider(EngineProvider):
    """
    In-memory provider for development and testing.

    Not meant for production traffic: no windows, no patterns, no rule language.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._event_types: dict[str, dict[str, type]] = {}
        self._subscriptions: dict[str, _Subscription] = {}
        self.destroyed = False
        self.received_events: list[tuple[str, dict[str, Any]]] = []

    def add_event_type(self, name: str, definition: dict[str, type]) -> None:
        with self._lock:
            self._check_alive()
            existing = self._event_types.get(name)
            if existing is not None and existing != definition:
                raise EngineError(f"Event type {name} already registered with another definition", event_type=name)
            self._event_types[name] = dict(definition)
        logger.debug(f"Registered event type {name}", extra={"fields": list(definition)})

    def has_event_type(self, name: str) -> bool:
        with self._lock:
            return name in self._event_types

    def send_event(self, attributes: dict[str, Any], event_type: str) -> None:
        with self._lock:
            self._check_alive()
            definition = self._event_types.get(event_type)
            if definition is None:
                raise EngineError(f"Unknown event type: {event_type}", event_type=event_type)

            missing = [field for field in definition if attributes.get(field) is None]
            if missing:
                raise EngineError(
                    f"Event is missing required fields: {', '.join(missing)}",
                    event_type=event_type,
                    details={"missing": missing},
                )
            wrong = [
                field for field, field_type in definition.items()
                if not isinstance(attributes[field], field_type)
            ]
            if wrong:
                raise EngineError(
                    f"Event fields have the wrong type: {', '.join(wrong)}",
                    event_type=event_type,
                    details={"wrong_type": wrong},
                )

            self.received_events.append((event_type, attributes))
            result = MapEventResult(event_type, definition, attributes)
            targets = [
                (sub.statement.name, list(sub.listeners))
                for sub in self._subscriptions.values()
                if sub.event_type == event_type and sub.statement.state == StatementState.STARTED
            ]

        for statement_name, listeners in targets:
            logger.debug(f"Statement {statement_name} fired", extra={"event_type": event_type})
            for listener in listeners:
                listener([result])

    def create_statement(
        self,
        name: str,
        text: str,
        event_type: str,
        listener: Listener | None = None,
    ) -> Statement:
        """
        Register a statement that forwards every event of event_type.

        Raises:
            EngineError: name already taken or event type unknown
        """
        with self._lock:
            self._check_alive()
            if name in self._subscriptions:
                raise EngineError(f"Statement {name} already exists")
            if event_type not in self._event_types:
                raise EngineError(f"Unknown event type: {event_type}", event_type=event_type)

            statement = Statement(
                name=name,
                text=text,
                state=StatementState.STARTED,
                time_last_state_change=_now_ms(),
            )
            subscription = _Subscription(statement, event_type)
            if listener is not None:
                subscription.listeners.append(listener)
            self._subscriptions[name] = subscription

        logger.info(f"Created statement {name}", extra={"event_type": event_type})
        return statement

    def stop_statement(self, name: str) -> None:
        with self._lock:
            subscription = self._subscriptions.get(name)
            if subscription is None:
                raise EngineError(f"Unknown statement: {name}")
            self._set_state(subscription.statement, StatementState.STOPPED)

    def get_statement(self, name: str) -> Statement | None:
        with self._lock:
            subscription = self._subscriptions.get(name)
            return subscription.statement if subscription else None

    def statements(self) -> list[Statement]:
        with self._lock:
            return [sub.statement for sub in self._subscriptions.values()]

    def destroy(self) -> None:
        with self._lock:
            if self.destroyed:
                return
            for subscription in self._subscriptions.values():
                self._set_state(subscription.statement, StatementState.DESTROYED)
                subscription.listeners.clear()
            self.destroyed = True
        logger.info("In-memory engine destroyed")

    def _set_state(self, statement: Statement, state: StatementState) -> None:
        statement.state = state
        statement.time_last_state_change = _now_ms()

    def _check_alive(self) -> None:
        if self.destroyed:
            raise EngineError("Engine has been destroyed")
