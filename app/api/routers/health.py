# app/api/routers/health.py
from fastapi import APIRouter, Depends

from app.api.deps import get_catalog
from app.services.live_catalog import LiveCatalog

router = APIRouter(tags=["health"])


@router.get("/health")
def health(catalog: LiveCatalog = Depends(get_catalog)):
    return {
        "status": "ok",
        "catalog": {
            "subscribed": catalog.running,
            "products_version": catalog.products.version,
            "discounts_version": catalog.discounts.version,
        },
    }
