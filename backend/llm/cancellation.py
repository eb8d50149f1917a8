"""
Cooperative cancellation shared by one arena run.

A single token is handed to the orchestrator and every adapter call it
spawns.  Adapters poll ``raise_if_cancelled()`` between reads; the
orchestrator registers its tasks via ``on_cancel()`` so reads that are
blocked on the network are interrupted as well.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from llm.errors import StreamCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Idempotent cancel signal with callbacks.

    Only used from the event loop thread, so no locking is needed.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._callbacks: List[Callable[[], None]] = []
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation.  Calling it again is a no-op."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        logger.info(f"Run cancelled: {reason or 'no reason given'}")

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.warning(f"Cancellation callback failed: {e}")

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register a callback; runs immediately if already cancelled."""
        if self._event.is_set():
            callback()
        else:
            self._callbacks.append(callback)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise StreamCancelled(self._reason)
