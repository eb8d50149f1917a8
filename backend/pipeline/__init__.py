"""
Pipeline module for the model arena.

Provides the fan-out orchestrator, its outbound event sink and the
per-model metrics calculator.
"""

from pipeline.event_sink import EventSink
from pipeline.fanout import FanOutOrchestrator
from pipeline.metrics import compute_cost, summarize, tokens_per_second

__all__ = [
    "EventSink",
    "FanOutOrchestrator",
    "compute_cost",
    "summarize",
    "tokens_per_second",
]
