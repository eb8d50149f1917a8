"""
Adapter factory module.
Creates streaming adapters for a provider family based on configuration.
"""

import logging
from typing import Dict, Optional, Type

import httpx

from config import Settings, get_settings
from llm.base import StreamAdapter
from llm.anthropic_provider import AnthropicAdapter
from llm.openai_provider import OpenAIAdapter
from llm.gemini_provider import GeminiAdapter
from models.catalog import ProviderFamily

logger = logging.getLogger(__name__)

# ============================================================
# Adapter Registry
# ============================================================
ADAPTERS: Dict[ProviderFamily, Type[StreamAdapter]] = {
    ProviderFamily.ANTHROPIC: AnthropicAdapter,
    ProviderFamily.OPENAI: OpenAIAdapter,
    ProviderFamily.GOOGLE: GeminiAdapter,
}


def _credentials_for(family: ProviderFamily, settings: Settings) -> Dict[str, Optional[str]]:
    if family is ProviderFamily.ANTHROPIC:
        return {"api_key": settings.anthropic_api_key, "base_url": settings.anthropic_base_url}
    if family is ProviderFamily.GOOGLE:
        return {"api_key": settings.gemini_api_key, "base_url": settings.gemini_base_url}
    return {"api_key": settings.openai_api_key, "base_url": settings.openai_base_url}


def create_adapter(
    family: ProviderFamily,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StreamAdapter:
    """
    Create a streaming adapter for a provider family.

    Args:
        family: Protocol family of the model being called
        settings: Settings to read keys, base URLs and timeouts from
        transport: Optional httpx transport shared by the adapter's calls

    Returns:
        StreamAdapter instance for the family
    """
    settings = settings or get_settings()
    adapter_class = ADAPTERS[ProviderFamily(family)]
    timeout = httpx.Timeout(
        settings.provider_read_timeout,
        connect=settings.provider_connect_timeout,
    )
    return adapter_class(
        timeout=timeout,
        transport=transport,
        **_credentials_for(ProviderFamily(family), settings),
    )
