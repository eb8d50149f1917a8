"""
Abstract base class for streaming provider adapters.
All provider families must implement this interface.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from llm.cancellation import CancellationToken
from llm.errors import MissingCredentialError, ProviderHTTPError, ProviderStreamError
from llm.line_decoder import iter_sse_data
from models.catalog import ModelDescriptor
from models.run import RunRequest

logger = logging.getLogger(__name__)

# Receives each generated text fragment as soon as it is parsed
EmitFn = Callable[[str], Awaitable[None]]

# Error bodies are only ever shown to the user as a short message
ERROR_BODY_LIMIT = 300


@dataclass
class AdapterResult:
    """Raw counters from one finished provider call.

    Attributes:
        ttft: Milliseconds to first fragment, 0 if none was produced.
        total_time: Milliseconds from call issue to end of stream.
    """
    ttft: int
    total_time: int
    input_tokens: int
    output_tokens: int
    output: str


@dataclass
class StreamState:
    """Mutable accumulator owned by exactly one adapter call."""
    started_at: float = field(default_factory=time.perf_counter)
    ttft: Optional[int] = None
    input_tokens: int = 0
    output_tokens: int = 0
    parts: List[str] = field(default_factory=list)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)

    def add_text(self, text: str) -> None:
        if self.ttft is None:
            self.ttft = self.elapsed_ms()
        self.parts.append(text)

    def to_result(self) -> AdapterResult:
        return AdapterResult(
            ttft=self.ttft or 0,
            total_time=self.elapsed_ms(),
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            output="".join(self.parts),
        )


def dig(obj: Any, *path: Any) -> Any:
    """Walk nested dicts/lists, returning None on any missing step."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(obj, list) or len(obj) <= key:
                return None
        elif not isinstance(obj, dict):
            return None
        obj = obj[key] if isinstance(key, int) else obj.get(key)
        if obj is None:
            return None
    return obj


def as_int(value: Any) -> int:
    """Token counts arrive as JSON numbers; anything else counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def parse_frame(data_str: str) -> Optional[Dict[str, Any]]:
    """Decode one SSE payload, or None for keep-alives and noise."""
    try:
        data = json.loads(data_str)
    except ValueError:
        logger.debug(f"Skipping unparseable frame: {data_str[:80]!r}")
        return None
    return data if isinstance(data, dict) else None


async def read_error_body(response: httpx.Response, limit: int = ERROR_BODY_LIMIT) -> str:
    """Read at most ``limit`` characters of an error response body."""
    buf = bytearray()
    # UTF-8 needs at most 4 bytes per character
    async for chunk in response.aiter_bytes():
        buf.extend(chunk)
        if len(buf) >= limit * 4:
            break
    return buf.decode("utf-8", errors="replace")[:limit]


class StreamAdapter(ABC):
    """
    Abstract base class for provider adapters.

    Each adapter implementation must:
    1. Implement build_request() to produce the provider's URL, headers and payload
    2. Implement handle_frame() to interpret one decoded event frame

    The shared stream() drives the HTTP call, the line decoder, timing and
    cancellation so every family measures its metrics the same way.
    """

    provider_name: str = "base"
    env_key: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize adapter with credentials.

        Args:
            api_key: Provider API key (required before any call)
            base_url: Override for the provider's API root
            timeout: httpx timeout; defaults to no read timeout
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.timeout = timeout or httpx.Timeout(None, connect=30.0)
        self.transport = transport

    @abstractmethod
    def build_request(
        self, model: ModelDescriptor, request: RunRequest
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        """
        Build the streaming call for one model.

        Returns:
            (url, headers, json payload)
        """
        pass

    @abstractmethod
    def handle_frame(self, frame: Dict[str, Any], state: StreamState) -> Optional[str]:
        """
        Interpret one decoded frame, updating token counters on ``state``.

        Returns:
            The text fragment carried by the frame, if any.

        Raises:
            ProviderStreamError: When the frame is an in-band provider error.
        """
        pass

    @staticmethod
    def temperature_for(model: ModelDescriptor, request: RunRequest) -> Optional[float]:
        """Temperature to send, or None when the model rejects the parameter."""
        if model.no_temperature:
            return None
        return request.temperature

    def stream_error(self, message: Optional[str], default: str) -> ProviderStreamError:
        return ProviderStreamError(message or default, provider=self.provider_name)

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.AsyncClient(**kwargs)

    async def stream(
        self,
        model: ModelDescriptor,
        request: RunRequest,
        emit: EmitFn,
        cancel: CancellationToken,
    ) -> AdapterResult:
        """
        Stream one completion, emitting each fragment as it arrives.

        Raises:
            MissingCredentialError: Before any network call if no key is set.
            ProviderHTTPError: The initial call returned a non-2xx status.
            ProviderStreamError: The provider reported an in-band error.
            StreamCancelled: The run was cancelled mid-stream.
        """
        if not self.api_key:
            raise MissingCredentialError(self.env_key, provider=self.provider_name)
        cancel.raise_if_cancelled()

        url, headers, payload = self.build_request(model, request)
        logger.debug(f"{self.provider_name} stream request to {url} with model {model.id}")

        async with self._client() as client:
            state = StreamState()
            async with client.stream("POST", url, headers=headers, json=payload) as response:
                if not response.is_success:
                    body = await read_error_body(response)
                    logger.error(f"{self.provider_name} stream error {response.status_code}: {body}")
                    raise ProviderHTTPError(response.status_code, body, provider=self.provider_name)

                async with aclosing(iter_sse_data(response.aiter_bytes())) as lines:
                    async for data_str in lines:
                        cancel.raise_if_cancelled()
                        frame = parse_frame(data_str)
                        if frame is None:
                            continue
                        text = self.handle_frame(frame, state)
                        if text:
                            state.add_text(text)
                            await emit(text)

        result = state.to_result()
        logger.info(
            f"{self.provider_name}/{model.id} finished: ttft={result.ttft}ms "
            f"total={result.total_time}ms in={result.input_tokens} out={result.output_tokens}"
        )
        return result
