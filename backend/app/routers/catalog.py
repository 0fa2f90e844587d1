from fastapi import APIRouter, Depends, HTTPException, status
import logging

from app.schemas.catalog import Catalog, CatalogSummary, Module
from app.services.catalog import get_catalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", response_model=CatalogSummary)
def get_catalog_summary(catalog: Catalog = Depends(get_catalog)):
    """Journey phases, touchpoints, module groups and modules for the Discovery UI."""
    return CatalogSummary(
        version=catalog.version,
        phases=catalog.phases,
        module_groups=catalog.module_groups,
        modules=catalog.modules,
    )


@router.get("/modules/{module_id}", response_model=Module)
def get_module(module_id: str, catalog: Catalog = Depends(get_catalog)):
    module = catalog.module(module_id)
    if module is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Module {module_id} not found",
        )
    return module
