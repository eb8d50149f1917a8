"""
Outbound event sink shared by every model task of a run.

Decouples producers (one task per model) from SSE delivery with an
asyncio.Queue.  Each emit serializes one event to a complete SSE record
and enqueues it in a single put, so records from different models never
interleave mid-write.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

from models.events import StreamEvent

logger = logging.getLogger(__name__)


class EventSink:
    """Ordered, close-aware queue of SSE records."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.records_written = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: StreamEvent) -> bool:
        """Enqueue one event.  Returns False (and drops it) once closed."""
        if self._closed:
            return False
        self._queue.put_nowait(event.to_sse())
        self.records_written += 1
        return True

    def finish(self) -> None:
        """Mark the end of the stream after the last event."""
        if self._closed:
            return
        self._queue.put_nowait(None)
        self._closed = True

    def close(self) -> None:
        """Stop accepting writes, e.g. after the caller disconnected."""
        self._closed = True

    async def records(self) -> AsyncIterator[str]:
        """Yield records in write order until finish() is reached."""
        while True:
            item: Optional[str] = await self._queue.get()
            if item is None:
                break
            yield item
