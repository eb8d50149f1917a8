"""
Config router.
Reports provider credential status and the models catalogue.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from config import Settings, get_settings
from models.catalog import Catalog, CatalogError

logger = logging.getLogger(__name__)
router = APIRouter()


def get_catalog(settings: Settings = Depends(get_settings)) -> Catalog:
    """Load the catalogue fresh for each request so edits apply without a restart."""
    try:
        return Catalog.load(settings.models_catalog_path)
    except CatalogError as e:
        logger.error(f"Catalogue load failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/config")
async def get_config(
    catalog: Catalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Provider metadata with a configured flag, plus every model.

    Credential values themselves are never included.
    """
    providers = {}
    for key, info in catalog.providers.items():
        providers[key] = {
            **info.model_dump(by_alias=True, mode="json"),
            "configured": settings.has_credential(info.env_key),
        }
    return {
        "providers": providers,
        "models": [m.model_dump(by_alias=True, mode="json") for m in catalog.models],
    }
