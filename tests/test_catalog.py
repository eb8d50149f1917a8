"""Tests for the models catalogue and settings helpers."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from config import DEFAULT_CATALOG_PATH
from models.catalog import Catalog, CatalogError, ProviderFamily


def test_resolve_keeps_order_and_drops_unknown(catalog):
    resolved = catalog.resolve(["gemini-c", "nope", "claude-a", "gemini-c"])
    assert [m.id for m in resolved] == ["gemini-c", "claude-a"]


def test_resolve_empty(catalog):
    assert catalog.resolve([]) == []


def test_descriptor_aliases_and_flags(catalog):
    model = catalog.get("gpt-b")
    assert model.provider is ProviderFamily.OPENAI
    assert model.input_cost_per_1m == 2
    assert model.output_cost_per_1m == 8
    assert model.no_temperature is False


def test_load_from_file(tmp_path):
    path = tmp_path / "models.json"
    path.write_text(json.dumps({
        "providers": {"google": {"name": "Google", "envKey": "GEMINI_API_KEY", "color": "#4285f4"}},
        "models": [{"id": "g", "name": "G", "provider": "google", "inputCostPer1M": 1, "outputCostPer1M": 2,
                    "contextWindow": 1000000}],
    }))

    loaded = Catalog.load(path)

    assert loaded.providers["google"].env_key == "GEMINI_API_KEY"
    assert loaded.models[0].model_dump(by_alias=True)["contextWindow"] == 1000000


@pytest.mark.parametrize("content, message", [
    (None, "not found"),
    ("{not json", "not valid JSON"),
    (json.dumps({"models": [{"id": "x", "provider": "mistral"}]}), "invalid"),
])
def test_load_errors(tmp_path, content, message):
    path = tmp_path / "models.json"
    if content is not None:
        path.write_text(content)

    with pytest.raises(CatalogError, match=message):
        Catalog.load(path)


def test_bundled_catalogue_is_valid():
    catalog = Catalog.load(DEFAULT_CATALOG_PATH)
    assert {m.provider for m in catalog.models} == set(ProviderFamily)
    assert set(catalog.providers) == {f.value for f in ProviderFamily}


def test_has_credential(settings, monkeypatch):
    assert settings.has_credential("ANTHROPIC_API_KEY") is True
    settings.anthropic_api_key = ""
    assert settings.has_credential("ANTHROPIC_API_KEY") is False

    monkeypatch.setenv("MISTRAL_API_KEY", "m-key")
    monkeypatch.delenv("UNSET_KEY_NAME", raising=False)
    assert settings.has_credential("MISTRAL_API_KEY") is True
    assert settings.has_credential("UNSET_KEY_NAME") is False


def test_descriptor_is_immutable(catalog):
    model = catalog.get("claude-a")
    with pytest.raises(ValidationError):
        model.id = "changed"
