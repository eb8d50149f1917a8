"""
Fan-out orchestrator: one prompt, many models, one event stream.

Each resolved model runs in its own asyncio task.  Tasks share only the
cancellation token and the event sink; every other piece of state
(decoder buffers, token counters, output text) lives inside the
adapter call that owns it.
"""

import asyncio
import logging
from typing import Callable, List

from llm.base import StreamAdapter
from llm.cancellation import CancellationToken
from llm.errors import ProviderError, StreamCancelled
from llm.factory import create_adapter
from models.catalog import ModelDescriptor, ProviderFamily
from models.events import ChunkEvent, DoneEvent, ErrorEvent, StartEvent
from models.run import RunRequest
from pipeline.event_sink import EventSink
from pipeline.metrics import summarize

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[ProviderFamily], StreamAdapter]


class FanOutOrchestrator:
    """
    Runs every selected model concurrently and merges their events.

    Guarantees, per resolved model: one start event, then zero or more
    chunk events, then exactly one complete or error event (none at all
    when the run is cancelled).  A single done event follows once every
    model has settled.  No timeout is applied here; a stalled provider
    only delays done.
    """

    def __init__(
        self,
        sink: EventSink,
        cancel: CancellationToken,
        adapter_factory: AdapterFactory = create_adapter,
    ):
        self.sink = sink
        self.cancel = cancel
        self.adapter_factory = adapter_factory

    async def run(self, request: RunRequest, models: List[ModelDescriptor]) -> None:
        """Stream all models to the sink, then emit done and finish it."""
        logger.info(f"Arena run: {len(models)} model(s): {', '.join(m.id for m in models)}")

        tasks = [
            asyncio.create_task(self._run_model(model, request), name=f"arena:{model.id}")
            for model in models
        ]
        for task in tasks:
            self.cancel.on_cancel(task.cancel)

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        cancelled = sum(1 for o in outcomes if isinstance(o, asyncio.CancelledError))
        if cancelled:
            logger.info(f"Arena run finished with {cancelled} cancelled model(s)")

        self.sink.emit(DoneEvent())
        self.sink.finish()

    async def _run_model(self, model: ModelDescriptor, request: RunRequest) -> None:
        self.sink.emit(StartEvent(model_id=model.id))

        async def emit_chunk(text: str) -> None:
            self.sink.emit(ChunkEvent(model_id=model.id, content=text))

        try:
            adapter = self.adapter_factory(model.provider)
            result = await adapter.stream(model, request, emit_chunk, self.cancel)
        except StreamCancelled:
            logger.info(f"{model.id}: stream cancelled")
            return
        except asyncio.CancelledError:
            logger.info(f"{model.id}: task cancelled")
            raise
        except ProviderError as e:
            self._report_failure(model, e)
            return
        except Exception as e:
            logger.error(f"{model.id}: unexpected stream failure: {e}", exc_info=True)
            self._report_failure(model, e)
            return

        self.sink.emit(summarize(result, model))

    def _report_failure(self, model: ModelDescriptor, exc: Exception) -> None:
        # Transport errors raised while tearing down a cancelled run are not failures
        if self.cancel.cancelled:
            logger.info(f"{model.id}: failed after cancellation, not reported: {exc}")
            return
        message = str(exc) or f"{type(exc).__name__}: Unknown error"
        logger.warning(f"{model.id}: {message}")
        self.sink.emit(ErrorEvent(model_id=model.id, error=message))
