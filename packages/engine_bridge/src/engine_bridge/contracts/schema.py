"""
Canonical Event Schema

The event type registered on the engine when the context is provisioned.
Every event the engine is expected to classify or route must carry these
fields.
"""

IOT_EVENT = "iotEvent"

# Reserved attribute names
ID_FIELD = "id"
TYPE_FIELD = "type"
SERVICE_FIELD = "service"
SUBSERVICE_FIELD = "subservice"

CANONICAL_EVENT_DEFINITION: dict[str, type] = {
    ID_FIELD: str,
    TYPE_FIELD: str,
    SERVICE_FIELD: str,
    SUBSERVICE_FIELD: str,
}
