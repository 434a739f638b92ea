"""
Event Codec

Converts between JSON-like event documents and the engine's structured event
representation.

- decode: document -> attribute map (nested documents stay nested)
- encode: engine result -> document, collecting per-property failures into
  an "errors" sub-document instead of aborting
- encode_statement: statement -> summary document (None-safe)
"""

import json
import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from engine_bridge.engine.base import EngineEventResult, Statement

logger = logging.getLogger(__name__)

ERRORS_KEY = "errors"
# Key under "errors" used when the property list itself cannot be read
PROPERTY_NAMES_ERROR = "propertyNames"


class CodecError(ValueError):
    """Input could not be decoded into an attribute map."""


def decode(document: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert a document to an engine attribute map.

    Nested documents become nested dicts. Field names are kept as-is and
    nothing is validated against the canonical schema; arrays and any other
    values are passed through untouched.
    """
    if not isinstance(document, Mapping):
        raise CodecError(f"Expected a JSON object, got {type(document).__name__}")

    attributes: dict[str, Any] = {}
    for key, value in document.items():
        if isinstance(value, Mapping):
            attributes[key] = decode(value)
        else:
            attributes[key] = value
    return attributes


def decode_json(text: str) -> dict[str, Any]:
    """Parse JSON text and decode it to an attribute map."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise CodecError(f"Invalid JSON: {e}") from e
    return decode(document)


def _to_document_value(value: Any) -> Any:
    """
    Return value as a JSON-representable document value.

    Raises:
        ValueError: value (or something nested in it) cannot be represented
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"JSON does not allow non-finite numbers: {value}")
        return value
    if isinstance(value, Enum):
        return _to_document_value(value.value)
    if isinstance(value, Mapping):
        converted = {}
        for key, nested in value.items():
            if not isinstance(key, str):
                raise ValueError(f"Document keys must be strings, got {type(key).__name__}")
            converted[key] = _to_document_value(nested)
        return converted
    if isinstance(value, (list, tuple)):
        return [_to_document_value(item) for item in value]
    raise ValueError(f"Value of type {type(value).__name__} is not representable in a document")


def encode(result: EngineEventResult) -> dict[str, Any]:
    """
    Convert an engine result to a document.

    Properties are stored in the order the result declares them. A property
    that cannot be read or represented is recorded under "errors" (name ->
    reason) and the remaining properties are still converted. Never raises.
    """
    document: dict[str, Any] = {}
    errors: dict[str, str] = {}

    try:
        names = list(result.property_names)
    except Exception as e:
        logger.error(f"Could not list result properties: {e}")
        return {ERRORS_KEY: {PROPERTY_NAMES_ERROR: str(e)}}

    for name in names:
        try:
            document[name] = _to_document_value(result.get(name))
        except Exception as e:
            errors[name] = str(e)
            logger.error(
                f"Could not convert property {name}: {e}",
                extra={"property": name},
            )

    if errors:
        document[ERRORS_KEY] = errors
    return document


def encode_statement(statement: Statement | None) -> dict[str, Any] | None:
    """Summarize a statement, or return None when there is no statement."""
    if statement is None:
        return None
    return {
        "name": statement.name,
        "text": statement.text,
        "state": statement.state.value,
        "timeLastStateChange": statement.time_last_state_change,
    }


def to_json(document: Mapping[str, Any]) -> str:
    """Serialize a document to its wire form."""
    return json.dumps(document, ensure_ascii=False, allow_nan=False)
