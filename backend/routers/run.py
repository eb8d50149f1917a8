"""
Run router.
Fans one prompt out to several models and streams their events as SSE.
"""

import asyncio
import logging
from functools import partial

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from config import Settings, get_settings
from llm.cancellation import CancellationToken
from llm.factory import create_adapter
from models.catalog import Catalog
from models.run import RunRequest
from pipeline.event_sink import EventSink
from pipeline.fanout import FanOutOrchestrator
from routers.config import get_catalog

logger = logging.getLogger(__name__)
router = APIRouter()

# Keep track of background tasks to prevent garbage collection
_background_tasks = set()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # Disable proxy buffering (nginx) so chunks reach the browser live
    "X-Accel-Buffering": "no",
}


@router.post("/run")
async def run_models(
    data: RunRequest,
    catalog: Catalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    """Stream start/chunk/complete/error events for every selected model.

    Unknown model ids are dropped silently.  The stream ends with a
    single done event once every model has settled.
    """
    models = catalog.resolve(data.models)

    # ── Disconnect-aware streaming ─────────────────────────────────
    # The orchestrator runs as a background task writing into the
    # sink.  The SSE generator only drains the sink; if the client
    # goes away, Starlette tears the generator down and its finally
    # block closes the sink and cancels every in-flight provider call.
    sink = EventSink()
    cancel = CancellationToken()
    orchestrator = FanOutOrchestrator(
        sink,
        cancel,
        adapter_factory=partial(create_adapter, settings=settings),
    )

    run_task = asyncio.create_task(orchestrator.run(data, models))
    _background_tasks.add(run_task)
    run_task.add_done_callback(_background_tasks.discard)

    async def generate_stream():
        """SSE generator: reads from the sink, yields to client."""
        finished = False
        try:
            async for record in sink.records():
                yield record
            finished = True
        finally:
            if not finished:
                logger.info(
                    f"Client disconnected mid-run after {sink.records_written} record(s) "
                    f"({len(models)} model(s)); cancelling"
                )
                sink.close()
                cancel.cancel("client disconnected")

    return StreamingResponse(
        generate_stream(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
