"""
Canonical stream event definitions.

Every provider dialect is normalized to these shapes before reaching the
caller.  Each event serializes to one SSE record with camelCase keys.
"""

from typing import Literal, Union
from pydantic import BaseModel, Field


class _ModelEvent(BaseModel):
    """Event scoped to one model of the run."""
    model_id: str = Field(..., alias="modelId")

    class Config:
        populate_by_name = True
        protected_namespaces = ()

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(by_alias=True)}\n\n"


class StartEvent(_ModelEvent):
    """Emitted once per model before the provider call is issued."""
    type: Literal["start"] = "start"


class ChunkEvent(_ModelEvent):
    """One generated text fragment, in generation order."""
    type: Literal["chunk"] = "chunk"
    content: str


class CompleteEvent(_ModelEvent):
    """Final metrics for a model that finished successfully.

    Attributes:
        ttft: Milliseconds from call issue to first fragment (0 if none).
        total_time: Milliseconds from call issue to end of stream.
        tokens_per_second: Output tokens over total time, one decimal.
        cost: USD, from the catalogue's per-million prices.
    """
    type: Literal["complete"] = "complete"
    ttft: int
    total_time: int = Field(..., alias="totalTime")
    input_tokens: int = Field(..., alias="inputTokens")
    output_tokens: int = Field(..., alias="outputTokens")
    tokens_per_second: float = Field(..., alias="tokensPerSecond")
    cost: float


class ErrorEvent(_ModelEvent):
    """Emitted instead of CompleteEvent when a model's call fails."""
    type: Literal["error"] = "error"
    error: str


class DoneEvent(BaseModel):
    """Terminal event; always last on the stream."""
    type: Literal["done"] = "done"

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json()}\n\n"


StreamEvent = Union[StartEvent, ChunkEvent, CompleteEvent, ErrorEvent, DoneEvent]
