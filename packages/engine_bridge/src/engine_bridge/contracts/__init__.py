"""Engine contracts - canonical event schema shared with the engine."""

from engine_bridge.contracts.schema import (
    CANONICAL_EVENT_DEFINITION,
    ID_FIELD,
    IOT_EVENT,
    SERVICE_FIELD,
    SUBSERVICE_FIELD,
    TYPE_FIELD,
)

__all__ = [
    "CANONICAL_EVENT_DEFINITION",
    "ID_FIELD",
    "IOT_EVENT",
    "SERVICE_FIELD",
    "SUBSERVICE_FIELD",
    "TYPE_FIELD",
]
