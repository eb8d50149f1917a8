"""
OpenAI streaming adapter.
Uses the Responses API, whose stream is a sequence of typed response.* events.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from llm.base import StreamAdapter, StreamState, as_int, dig
from models.catalog import ModelDescriptor
from models.run import RunRequest

logger = logging.getLogger(__name__)


class OpenAIAdapter(StreamAdapter):
    """
    OpenAI Responses API adapter.
    Token usage arrives once, on the terminal response.completed event.
    """

    provider_name = "openai"
    env_key = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_request(
        self, model: ModelDescriptor, request: RunRequest
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})

        payload: Dict[str, Any] = {
            "model": model.id,
            "input": messages,
            "max_output_tokens": request.max_tokens,
            "stream": True,
        }
        temperature = self.temperature_for(model, request)
        if temperature is not None:
            payload["temperature"] = temperature
        if request.web_search:
            payload["tools"] = [{"type": "web_search"}]
        return f"{self.base_url}/responses", self._get_headers(), payload

    def handle_frame(self, frame: Dict[str, Any], state: StreamState) -> Optional[str]:
        event_type = frame.get("type")

        if event_type == "response.output_text.delta":
            delta = frame.get("delta")
            if isinstance(delta, str) and delta:
                return delta
        elif event_type == "response.completed":
            usage = dig(frame, "response", "usage")
            if isinstance(usage, dict):
                state.input_tokens = as_int(usage.get("input_tokens"))
                state.output_tokens = as_int(usage.get("output_tokens"))
        elif event_type == "response.failed":
            message = dig(frame, "response", "error", "message")
            raise self.stream_error(message, "OpenAI response failed")
        elif event_type == "error":
            raise self.stream_error(frame.get("message"), "OpenAI stream error")
        return None
