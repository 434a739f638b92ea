"""
Action Listener

Engine listener that turns statement firings into action calls.

The engine calls the listener on the thread that fed the triggering event,
where the request's correlation context is active. That context is captured
there and re-activated on the executor thread that performs the delivery, so
logs and the outbound correlator header stay tied to the originating request.
"""

import logging
from concurrent.futures import Executor, Future

from basecore import correlation
from basecore.correlation import CorrelationContext
from engine_bridge.actions.dispatcher import ActionDispatcher, DispatchOutcome
from engine_bridge.codec import encode
from engine_bridge.engine.base import EngineEventResult

logger = logging.getLogger(__name__)


class ActionListener:
    """
    Posts every result of a statement to a target URL.

    Args:
        dispatcher: Dispatcher used for delivery
        target_url: Action endpoint
        executor: Where deliveries run (one task per result)
    """

    def __init__(self, dispatcher: ActionDispatcher, target_url: str, executor: Executor):
        self.dispatcher = dispatcher
        self.target_url = target_url
        self.executor = executor

    def __call__(self, results: list[EngineEventResult]) -> list[Future]:
        captured = correlation.current()
        futures = []
        for result in results:
            document = encode(result)
            futures.append(self.executor.submit(self._deliver, captured, document))
        return futures

    def _deliver(self, context: CorrelationContext | None, document: dict) -> DispatchOutcome:
        with correlation.bound(context):
            correlator_id = context.correlator_id if context else None
            try:
                outcome = self.dispatcher.post(self.target_url, document, correlator_id)
            except Exception as e:
                logger.error(f"Action delivery to {self.target_url} crashed: {e}", exc_info=True)
                return DispatchOutcome.failed(f"{type(e).__name__}: {e}")
            if outcome:
                logger.info(f"Action delivered to {self.target_url}")
            else:
                logger.warning(
                    f"Action delivery to {self.target_url} failed: {outcome.reason}",
                    extra={"status_code": outcome.status_code},
                )
            return outcome
