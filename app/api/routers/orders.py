# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store
from app.domain.errors import NotFoundError, StoreWriteError
from app.domain.schemas import Order, SalesReport
from app.services.document_store import DocumentStore
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(store: DocumentStore = Depends(get_store)):
    return OrderService(store)


@router.get("/", response_model=List[Order])
def list_orders(svc: OrderService = Depends(get_service)):
    return svc.list_orders()


@router.get("/report", response_model=SalesReport)
def sales_report(svc: OrderService = Depends(get_service)):
    """
    Sprzedaz dzis / w tym miesiacu / w tym roku, per miesiac i per produkt.
    """
    return svc.sales_report()


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: str, svc: OrderService = Depends(get_service)):
    try:
        return svc.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{order_id}/delivered", response_model=Order)
def mark_delivered(order_id: str, svc: OrderService = Depends(get_service)):
    try:
        return svc.mark_delivered(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, svc: OrderService = Depends(get_service)):
    try:
        svc.delete_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))
