"""
Logging setup for basecore services.

Configures the root logger once, with correlation ids on every line.
"""

import logging
import sys

from basecore.correlation import CorrelationLogFilter
from basecore.settings import get_settings

LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(name)s] "
    "trans=%(transaction_id)s corr=%(correlator_id)s %(message)s"
)


def setup_logging(level: str | None = None) -> None:
    """
    Configure root logging.

    Safe to call more than once: the handler is only installed the first time.
    """
    root = logging.getLogger()
    root.setLevel((level or get_settings().LOG_LEVEL).upper())

    for handler in root.handlers:
        if any(isinstance(f, CorrelationLogFilter) for f in handler.filters):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationLogFilter())
    root.addHandler(handler)

    # Quiet down chatty libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
