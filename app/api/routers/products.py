# app/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_catalog, get_store
from app.domain.errors import NotFoundError, StoreWriteError, ValidationFailure
from app.domain.schemas import Product, ProductIn, ProductUpdate, ProductView
from app.services.catalog_service import CatalogService
from app.services.document_store import DocumentStore
from app.services.live_catalog import LiveCatalog

router = APIRouter(prefix="/products", tags=["products"])


def get_service(
    store: DocumentStore = Depends(get_store),
    catalog: LiveCatalog = Depends(get_catalog),
):
    return CatalogService(store, catalog)


@router.get("/", response_model=List[ProductView])
def list_products(
    category: Optional[str] = Query(None),
    featured: bool = Query(False),
    svc: CatalogService = Depends(get_service),
):
    return svc.list_products(category=category, featured=featured)


@router.get("/inventory", response_model=List[ProductView])
def inventory(svc: CatalogService = Depends(get_service)):
    """
    Widok magazynu admina: produkty z aktywnym rabatem i cena po rabacie.
    """
    return svc.inventory()


@router.get("/{product_id}", response_model=ProductView)
def get_product(
    product_id: str,
    quantity: int = Query(1),
    svc: CatalogService = Depends(get_service),
):
    try:
        return svc.get_product(product_id, quantity=quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/", response_model=Product, status_code=201)
def create_product(payload: ProductIn, svc: CatalogService = Depends(get_service)):
    try:
        return svc.create_product(payload)
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.patch("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    svc: CatalogService = Depends(get_service),
):
    try:
        return svc.update_product(product_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: str, svc: CatalogService = Depends(get_service)):
    try:
        svc.delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))
