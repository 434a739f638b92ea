"""
Action Dispatcher

POSTs an action payload to an external endpoint and classifies the outcome.

- 2xx: success, response body lines logged at INFO
- any other status: failure, error body lines logged at ERROR
- bad URL or transport error: failure, no exception reaches the caller

No retries and no timeout override: callers needing either layer them on top.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from basecore import correlation
from basecore.settings import get_settings
from engine_bridge.codec import to_json

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


@dataclass
class DispatchOutcome:
    """
    Result of an action dispatch.

    Application (non-2xx) and transport failures are both reported as
    success=False; reason tells them apart for diagnostics only.
    """

    success: bool
    status_code: int | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, status_code: int) -> "DispatchOutcome":
        return cls(success=True, status_code=status_code)

    @classmethod
    def failed(cls, reason: str, status_code: int | None = None) -> "DispatchOutcome":
        return cls(success=False, status_code=status_code, reason=reason)

    def __bool__(self) -> bool:
        return self.success


def _header_value(value: str) -> bytes:
    """
    Encode a header value for the wire.

    Inbound headers are decoded as latin-1, so encoding back to latin-1
    restores the bytes as received; anything outside latin-1 goes as UTF-8.
    """
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")


def _parse_target(target_url: str) -> httpx.URL:
    """
    Validate an action URL before any network I/O.

    Raises:
        httpx.InvalidURL: URL cannot be used for an action call
    """
    url = httpx.URL(target_url)
    if url.scheme not in ("http", "https"):
        raise httpx.InvalidURL(f"Unsupported URL scheme: {url.scheme or '(none)'}")
    if not url.host:
        raise httpx.InvalidURL("URL has no host")
    return url


class ActionDispatcher:
    """
    Synchronous HTTP delivery of action payloads.

    A new client is opened for every post, so concurrent posts share no
    mutable state.

    Args:
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        correlator_header: Header name for the correlator id (defaults to settings)
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        correlator_header: str | None = None,
    ):
        self.transport = transport
        self.correlator_header = correlator_header or get_settings().CORRELATOR_HEADER

    def post(
        self,
        target_url: str,
        body: dict[str, Any],
        correlator_id: str | None = None,
    ) -> DispatchOutcome:
        """
        POST body as JSON to target_url.

        Args:
            target_url: Action endpoint
            body: Document to send
            correlator_id: Correlator to propagate; defaults to the active
                correlation context

        Returns:
            DispatchOutcome (never raises for bad URLs, I/O or HTTP errors)
        """
        try:
            url = _parse_target(target_url)
        except (httpx.InvalidURL, TypeError) as e:
            logger.error(f"exception invalid action URL {target_url!r}: {e}")
            return DispatchOutcome.failed(f"Invalid URL: {e}")

        try:
            content = to_json(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            logger.error(f"action body is not serializable: {e}")
            return DispatchOutcome.failed(f"Body not serializable: {e}")

        if correlator_id is None:
            context = correlation.current()
            correlator_id = context.correlator_id if context else None

        headers: dict[str, str | bytes] = {"Content-Type": JSON_CONTENT_TYPE}
        if correlator_id:
            headers[self.correlator_header] = _header_value(correlator_id)
        else:
            logger.warning(f"No correlator available for action call to {url}")

        try:
            with httpx.Client(transport=self.transport) as client:
                with client.stream("POST", url, content=content, headers=headers) as response:
                    return self._classify(response)
        except httpx.RequestError as e:
            logger.error(f"exception {type(e).__name__}: {e}", extra={"url": str(url)})
            return DispatchOutcome.failed(f"{type(e).__name__}: {e}")

    def _classify(self, response: httpx.Response) -> DispatchOutcome:
        code = response.status_code
        message = response.reason_phrase
        logger.debug(f"action http response {code} {message}")

        if response.is_success:
            for line in response.iter_lines():
                logger.info(f"action response body: {line}")
            return DispatchOutcome.ok(code)

        logger.error(f"action response is not OK: {code} {message}")
        for line in response.iter_lines():
            logger.error(f"action error response body: {line}")
        return DispatchOutcome.failed(f"{code} {message}", status_code=code)
