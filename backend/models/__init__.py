"""
Pydantic models package.
Each module contains models for a specific domain.
"""

from models.catalog import Catalog, CatalogError, ModelDescriptor, ProviderFamily, ProviderInfo
from models.run import RunRequest
from models.events import ChunkEvent, CompleteEvent, DoneEvent, ErrorEvent, StartEvent, StreamEvent

__all__ = [
    "Catalog", "CatalogError", "ModelDescriptor", "ProviderFamily", "ProviderInfo",
    "RunRequest",
    "StartEvent", "ChunkEvent", "CompleteEvent", "ErrorEvent", "DoneEvent", "StreamEvent",
]
