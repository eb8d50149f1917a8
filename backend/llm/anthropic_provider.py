"""
Anthropic streaming adapter.
Speaks the Messages API event stream (message_start / content_block_delta / ...).
"""

import logging
from typing import Any, Dict, Optional, Tuple

from llm.base import StreamAdapter, StreamState, as_int, dig
from models.catalog import ModelDescriptor
from models.run import RunRequest

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}


class AnthropicAdapter(StreamAdapter):
    """
    Anthropic Messages API adapter.
    Usage arrives split: input tokens on message_start, output on message_delta.
    """

    provider_name = "anthropic"
    env_key = "ANTHROPIC_API_KEY"
    default_base_url = "https://api.anthropic.com"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        super().__init__(api_key, base_url, **kwargs)
        # Strip any path suffix users may have pasted (e.g. /v1/messages)
        # so we don't end up with double paths like /v1/messages/v1/messages
        if "/v1" in self.base_url:
            self.base_url = self.base_url.split("/v1")[0]

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        return {
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01",
        }

    def build_request(
        self, model: ModelDescriptor, request: RunRequest
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "model": model.id,
            "messages": [{"role": "user", "content": request.prompt}],
            "max_tokens": request.max_tokens,
            "stream": True,
        }
        if request.system_prompt:
            payload["system"] = request.system_prompt
        temperature = self.temperature_for(model, request)
        if temperature is not None:
            payload["temperature"] = temperature
        if request.web_search:
            payload["tools"] = [dict(WEB_SEARCH_TOOL)]
        return f"{self.base_url}/v1/messages", self._get_headers(), payload

    def handle_frame(self, frame: Dict[str, Any], state: StreamState) -> Optional[str]:
        event_type = frame.get("type")

        if event_type == "message_start":
            state.input_tokens = as_int(dig(frame, "message", "usage", "input_tokens"))
        elif event_type == "content_block_delta":
            # Only text deltas carry output; tool input deltas are ignored
            text = dig(frame, "delta", "text")
            if isinstance(text, str) and text:
                return text
        elif event_type == "message_delta":
            state.output_tokens = as_int(dig(frame, "usage", "output_tokens"))
        elif event_type == "error":
            message = dig(frame, "error", "message")
            raise self.stream_error(message, "Anthropic stream error")
        return None
