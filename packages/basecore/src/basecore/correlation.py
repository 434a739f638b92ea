"""
Correlation context for request tracing.

Every inbound request gets a fresh transaction id and a correlator id (taken
from the inbound correlator header when present). Both are kept in a context
variable scoped to the unit of work handling the request, read by the logging
filter and by outbound action calls.

Asynchronous continuations (listener callbacks on executor threads) do not
inherit the context by themselves: capture it with current() and re-activate
it on the worker with bound().
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator
from uuid import uuid4


@dataclass(frozen=True)
class CorrelationContext:
    """
    Identifiers for one inbound request.

    Attributes:
        transaction_id: Unique to this request's processing, never reused
        correlator_id: Shared by every system taking part in the same
            business transaction
    """

    transaction_id: str
    correlator_id: str


_current: ContextVar[CorrelationContext | None] = ContextVar("correlation_context", default=None)


def new_id() -> str:
    """Generate a globally unique identifier."""
    return str(uuid4())


def begin(inbound_header_value: str | None = None) -> CorrelationContext:
    """
    Start the correlation context for a new unit of work.

    Args:
        inbound_header_value: Correlator header received with the request, if any

    Returns:
        The context now active for the caller
    """
    transaction_id = new_id()
    if inbound_header_value and inbound_header_value.strip():
        correlator_id = inbound_header_value
    else:
        correlator_id = new_id()

    context = CorrelationContext(transaction_id=transaction_id, correlator_id=correlator_id)
    _current.set(context)
    return context


def current() -> CorrelationContext | None:
    """Return the active context, or None if begin() was never called here."""
    return _current.get()


def clear() -> None:
    """Drop the context of the current unit of work."""
    _current.set(None)


@contextmanager
def bound(context: CorrelationContext | None) -> Iterator[CorrelationContext | None]:
    """Activate a captured context for the duration of the block."""
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)


class CorrelationLogFilter(logging.Filter):
    """
    Logging filter that adds correlation ids to all log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = _current.get()
        record.transaction_id = context.transaction_id if context else "-"
        record.correlator_id = context.correlator_id if context else "-"
        return True
