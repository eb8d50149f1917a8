"""
LLM adapters package.
Unified streaming interface over the supported provider families.
"""

from llm.base import AdapterResult, StreamAdapter
from llm.cancellation import CancellationToken
from llm.errors import (
    MissingCredentialError,
    ProviderError,
    ProviderHTTPError,
    ProviderStreamError,
    StreamCancelled,
)
from llm.factory import create_adapter

__all__ = [
    "AdapterResult",
    "StreamAdapter",
    "CancellationToken",
    "MissingCredentialError",
    "ProviderError",
    "ProviderHTTPError",
    "ProviderStreamError",
    "StreamCancelled",
    "create_adapter",
]
