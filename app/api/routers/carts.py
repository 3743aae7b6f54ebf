# app/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_cart_store, get_catalog, get_store
from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.schemas import AddToCartIn, BuyNowItem, CartOut, QuantityIn
from app.services.cart_service import CartService, CartStore
from app.services.document_store import DocumentStore
from app.services.live_catalog import LiveCatalog

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    store: DocumentStore = Depends(get_store),
    catalog: LiveCatalog = Depends(get_catalog),
    cart_store: CartStore = Depends(get_cart_store),
):
    return CartService(store=store, catalog=catalog, cart_store=cart_store)


@router.get("/", response_model=CartOut)
def get_cart(svc: CartService = Depends(get_service)):
    return svc.get_cart()


@router.post("/items", response_model=CartOut)
def add_item(payload: AddToCartIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_product(
            product_id=payload.product_id,
            quantity=payload.quantity,
            variation=payload.variation,
            size=payload.size,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/items/{entry_id}", response_model=CartOut)
def change_quantity(
    entry_id: str,
    payload: QuantityIn,
    svc: CartService = Depends(get_service),
):
    """
    Ilosc 0 usuwa pozycje z koszyka.
    """
    try:
        return svc.change_quantity(entry_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/items/{entry_id}", response_model=CartOut)
def remove_item(entry_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.remove_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/", response_model=CartOut)
def clear_cart(svc: CartService = Depends(get_service)):
    return svc.clear()


@router.post("/buy-now", response_model=BuyNowItem)
def buy_now(payload: AddToCartIn, svc: CartService = Depends(get_service)):
    try:
        return svc.buy_now(
            product_id=payload.product_id,
            quantity=payload.quantity,
            variation=payload.variation,
            size=payload.size,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/buy-now", response_model=BuyNowItem)
def get_buy_now(svc: CartService = Depends(get_service)):
    try:
        return svc.get_buy_now()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
