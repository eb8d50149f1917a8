"""
Models catalogue definitions.
Providers and models (with pricing) loaded from the static models.json.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class ProviderFamily(str, Enum):
    """Wire protocol dialect spoken by a model's backend."""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"


class CatalogError(Exception):
    """The catalogue file is missing or malformed."""


class ProviderInfo(BaseModel):
    """Display metadata for one provider family.

    Attributes:
        name: Human readable provider name.
        env_key: Environment variable holding the provider credential.
    """
    name: str
    env_key: str = Field(..., alias="envKey")

    class Config:
        populate_by_name = True
        frozen = True
        extra = "allow"


class ModelDescriptor(BaseModel):
    """One selectable model.

    Attributes:
        id: Identifier sent to the provider API.
        name: Display name.
        provider: Protocol family used to stream from this model.
        input_cost_per_1m: USD per million input tokens.
        output_cost_per_1m: USD per million output tokens.
        no_temperature: Model rejects the temperature parameter.
    """
    id: str
    name: str = ""
    provider: ProviderFamily
    input_cost_per_1m: float = Field(0.0, alias="inputCostPer1M", ge=0)
    output_cost_per_1m: float = Field(0.0, alias="outputCostPer1M", ge=0)
    no_temperature: bool = Field(False, alias="noTemperature")

    class Config:
        populate_by_name = True
        frozen = True
        extra = "allow"


class Catalog(BaseModel):
    """The full catalogue: provider metadata plus every known model."""
    providers: Dict[str, ProviderInfo] = Field(default_factory=dict)
    models: List[ModelDescriptor] = Field(default_factory=list)

    def get(self, model_id: str) -> Optional[ModelDescriptor]:
        for model in self.models:
            if model.id == model_id:
                return model
        return None

    def resolve(self, model_ids: List[str]) -> List[ModelDescriptor]:
        """Map requested ids to descriptors, keeping request order.

        Unknown ids are dropped without error and repeated ids collapse
        to their first occurrence.
        """
        resolved: List[ModelDescriptor] = []
        seen = set()
        for model_id in model_ids:
            if model_id in seen:
                continue
            model = self.get(model_id)
            if model is None:
                logger.info(f"Ignoring unknown model id: {model_id}")
                continue
            seen.add(model_id)
            resolved.append(model)
        return resolved

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Catalog":
        """Read and validate a catalogue JSON file."""
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise CatalogError(f"Models catalogue not found: {path}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Models catalogue is not valid JSON: {e}") from e

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise CatalogError(f"Models catalogue is invalid: {e}") from e
