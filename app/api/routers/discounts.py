# app/api/routers/discounts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_catalog, get_store
from app.domain.errors import NotFoundError, StoreWriteError, ValidationFailure
from app.domain.schemas import Discount, DiscountIn, DiscountPreview, DiscountPreviewIn, DiscountView
from app.services.discount_service import DiscountService
from app.services.document_store import DocumentStore
from app.services.live_catalog import LiveCatalog

router = APIRouter(prefix="/discounts", tags=["discounts"])


def get_service(
    store: DocumentStore = Depends(get_store),
    catalog: LiveCatalog = Depends(get_catalog),
):
    return DiscountService(store, catalog)


@router.get("/", response_model=List[DiscountView])
def list_discounts(svc: DiscountService = Depends(get_service)):
    return svc.list_discounts()


@router.post("/preview", response_model=List[DiscountPreview])
def preview_discount(payload: DiscountPreviewIn, svc: DiscountService = Depends(get_service)):
    """
    Podglad cen przed utworzeniem rabatu (ta sama formula co na stronie produktu).
    """
    return svc.preview(payload.product_ids, payload.discount_percentage)


@router.post("/", response_model=Discount, status_code=201)
def create_discount(payload: DiscountIn, svc: DiscountService = Depends(get_service)):
    try:
        return svc.create_discount(payload)
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/{discount_id}/toggle", response_model=Discount)
def toggle_discount(discount_id: str, svc: DiscountService = Depends(get_service)):
    try:
        return svc.toggle_discount(discount_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/{discount_id}", status_code=204)
def delete_discount(discount_id: str, svc: DiscountService = Depends(get_service)):
    try:
        svc.delete_discount(discount_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))
