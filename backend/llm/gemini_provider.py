"""
Gemini streaming adapter.
Uses streamGenerateContent with alt=sse; each frame is a partial candidate.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from llm.base import StreamAdapter, StreamState, as_int, dig
from models.catalog import ModelDescriptor
from models.run import RunRequest

logger = logging.getLogger(__name__)


class GeminiAdapter(StreamAdapter):
    """
    Google Gemini adapter.
    usageMetadata may appear on any frame with cumulative counts; the
    latest one wins.
    """

    provider_name = "google"
    env_key = "GEMINI_API_KEY"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def build_request(
        self, model: ModelDescriptor, request: RunRequest
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        generation_config: Dict[str, Any] = {"maxOutputTokens": request.max_tokens}
        temperature = self.temperature_for(model, request)
        if temperature is not None:
            generation_config["temperature"] = temperature

        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }
        if request.system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": request.system_prompt}]}
        if request.web_search:
            payload["tools"] = [{"google_search": {}}]

        url = f"{self.base_url}/models/{model.id}:streamGenerateContent?alt=sse"
        return url, self._get_headers(), payload

    def handle_frame(self, frame: Dict[str, Any], state: StreamState) -> Optional[str]:
        usage = frame.get("usageMetadata")
        if isinstance(usage, dict):
            state.input_tokens = as_int(usage.get("promptTokenCount"))
            state.output_tokens = as_int(usage.get("candidatesTokenCount"))

        text = dig(frame, "candidates", 0, "content", "parts", 0, "text")
        if isinstance(text, str) and text:
            return text
        return None
