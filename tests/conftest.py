"""Shared fixtures for arena tests.

Provider streams are simulated with httpx.MockTransport serving a body
split into caller-chosen byte chunks, so tests control exactly where
transport reads break the SSE framing.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx
import pytest

from config import Settings
from llm.base import AdapterResult
from models.catalog import Catalog, ModelDescriptor
from models.run import RunRequest


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered as the given chunks, one read each."""

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks = list(chunks)

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk

    async def aclose(self) -> None:
        pass


def sse_body(frames: Iterable[Any]) -> bytes:
    """Encode frames as an SSE body; strings are sent verbatim as data."""
    out = []
    for frame in frames:
        data = frame if isinstance(frame, str) else json.dumps(frame)
        out.append(f"data: {data}\n\n")
    return "".join(out).encode("utf-8")


def split_every(data: bytes, size: int) -> List[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return responder(request)

        super().__init__(handler)

    @property
    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


def streaming_transport(chunks: Iterable[bytes], status_code: int = 200) -> RecordingTransport:
    chunks = list(chunks)
    return RecordingTransport(
        lambda request: httpx.Response(
            status_code,
            headers={"content-type": "text/event-stream"},
            stream=ChunkedStream(chunks),
        )
    )


def make_model(
    model_id: str = "claude-sonnet-4-20250514",
    provider: str = "anthropic",
    input_cost: float = 3.0,
    output_cost: float = 15.0,
    no_temperature: bool = False,
) -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        name=model_id,
        provider=provider,
        input_cost_per_1m=input_cost,
        output_cost_per_1m=output_cost,
        no_temperature=no_temperature,
    )


def parse_records(records: Iterable[str]) -> List[Dict[str, Any]]:
    events = []
    for record in records:
        assert record.startswith("data: ") and record.endswith("\n\n"), record
        events.append(json.loads(record[len("data: "):]))
    return events


class FakeAdapter:
    """Scripted adapter: behaviour is chosen per model id.

    Each behaviour dict may hold ``fragments`` (emitted in order),
    ``error`` (raised after the fragments), ``hang`` (wait forever after
    the fragments) and ``result`` (AdapterResult to return).
    """

    def __init__(self, behaviours: Dict[str, Dict[str, Any]]):
        self.behaviours = behaviours
        self.calls: List[str] = []
        self.cancelled: List[str] = []

    async def stream(self, model, request, emit, cancel):
        self.calls.append(model.id)
        behaviour = self.behaviours.get(model.id, {})
        try:
            for fragment in behaviour.get("fragments", []):
                await emit(fragment)
                await asyncio.sleep(0)
            if behaviour.get("error") is not None:
                raise behaviour["error"]
            if behaviour.get("hang"):
                await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled.append(model.id)
            raise
        return behaviour.get("result") or AdapterResult(
            ttft=10, total_time=1000, input_tokens=5, output_tokens=20,
            output="".join(behaviour.get("fragments", [])),
        )


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        anthropic_api_key="sk-ant-test",
        openai_api_key="sk-openai-test",
        gemini_api_key="gemini-test",
        anthropic_base_url="http://anthropic.test",
        openai_base_url="http://openai.test/v1",
        gemini_base_url="http://gemini.test/v1beta",
        models_catalog_path=tmp_path / "models.json",
    )


@pytest.fixture()
def catalog() -> Catalog:
    return Catalog.model_validate({
        "providers": {
            "anthropic": {"name": "Anthropic", "envKey": "ANTHROPIC_API_KEY"},
            "openai": {"name": "OpenAI", "envKey": "OPENAI_API_KEY"},
            "google": {"name": "Google", "envKey": "GEMINI_API_KEY"},
        },
        "models": [
            {"id": "claude-a", "name": "Claude A", "provider": "anthropic",
             "inputCostPer1M": 3, "outputCostPer1M": 15},
            {"id": "gpt-b", "name": "GPT B", "provider": "openai",
             "inputCostPer1M": 2, "outputCostPer1M": 8},
            {"id": "gemini-c", "name": "Gemini C", "provider": "google",
             "inputCostPer1M": 1.25, "outputCostPer1M": 10},
        ],
    })


@pytest.fixture()
def run_request() -> Callable[..., RunRequest]:
    def _make(models: Optional[List[str]] = None, **kwargs) -> RunRequest:
        return RunRequest(prompt=kwargs.pop("prompt", "Say hello"), models=models or [], **kwargs)
    return _make
