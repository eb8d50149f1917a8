"""
Run request model definitions.
A single prompt fanned out to several models.
"""

from typing import List
from pydantic import BaseModel, Field


class RunRequest(BaseModel):
    """Schema for submitting a prompt to several models.

    Args:
        prompt: User prompt sent to every model.
        models: Model ids in display order; unknown ids are ignored.
        system_prompt: Optional system instruction ('' means none).
        max_tokens: Output token limit per model.
        temperature: Sampling temperature, omitted for models that reject it.
        web_search: Enable each provider's built-in web search tool.
    """
    prompt: str = Field(..., min_length=1, max_length=500000)
    models: List[str] = Field(default_factory=list)
    system_prompt: str = Field("", alias="systemPrompt")
    max_tokens: int = Field(4096, alias="maxTokens", ge=1)
    temperature: float = Field(0.0, ge=0.0, le=2.0)
    web_search: bool = Field(False, alias="webSearch")

    class Config:
        populate_by_name = True
