"""
Run metrics: throughput and cost for one finished model call.

Pure functions of an AdapterResult and the model's catalogue prices.
"""

import math

from llm.base import AdapterResult
from models.catalog import ModelDescriptor
from models.events import CompleteEvent

TOKENS_PER_PRICE_UNIT = 1_000_000


def tokens_per_second(output_tokens: int, total_time_ms: int) -> float:
    """Output tokens over wall time, rounded half-up to one decimal.

    Zero elapsed time yields 0.0 instead of dividing by zero.
    """
    if total_time_ms <= 0:
        return 0.0
    rate = output_tokens / (total_time_ms / 1000)
    return math.floor(rate * 10 + 0.5) / 10


def compute_cost(input_tokens: int, output_tokens: int, model: ModelDescriptor) -> float:
    """USD cost from per-million-token input and output prices."""
    return (
        input_tokens * model.input_cost_per_1m / TOKENS_PER_PRICE_UNIT
        + output_tokens * model.output_cost_per_1m / TOKENS_PER_PRICE_UNIT
    )


def summarize(result: AdapterResult, model: ModelDescriptor) -> CompleteEvent:
    """Build the complete event for a successful call."""
    return CompleteEvent(
        model_id=model.id,
        ttft=result.ttft,
        total_time=result.total_time,
        input_tokens=result.input_tokens,
        output_tokens=result.output_tokens,
        tokens_per_second=tokens_per_second(result.output_tokens, result.total_time),
        cost=compute_cost(result.input_tokens, result.output_tokens, model),
    )
