# app/services/order_service.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.domain.errors import NotFoundError
from app.domain.schemas import MonthTotal, Order, ProductSales, SalesReport
from app.services.document_store import ORDERS, DocumentStore
from app.services.notification_service import NotificationService
from app.utils.dates import now_utc, to_date
from app.utils.logging import get_logger

logger = get_logger(__name__)

DELIVERED = "delivered"


def _order_time(order: Order, now: datetime) -> datetime:
    #zamowienie bez daty liczymy jako biezace
    return to_date(order.created_at) if order.created_at else now


def build_sales_report(orders: List[Order], now: datetime) -> SalesReport:
    """
    Sprzedaz od poczatku dnia / miesiaca / roku, sumy per miesiac
    i ranking produktow po przychodzie.
    """
    now = to_date(now)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)
    start_of_year = start_of_month.replace(month=1)

    day_total = month_total = year_total = 0.0
    by_month: Dict[str, float] = {}
    products: Dict[str, Dict] = {}

    for order in orders:
        placed = _order_time(order, now)
        total = order.total or 0

        if placed >= start_of_day:
            day_total += total
        if placed >= start_of_month:
            month_total += total
        if placed >= start_of_year:
            year_total += total

        label = placed.strftime("%b")
        by_month[label] = by_month.get(label, 0) + total

        for item in order.items:
            key = item.product_id or f"{item.title}-{item.type}-{item.size}"
            entry = products.setdefault(key, {"title": item.title, "total_qty": 0, "total_sales": 0.0})
            entry["total_qty"] += item.quantity
            entry["total_sales"] += item.price * item.quantity

    ranked = sorted(products.values(), key=lambda p: p["total_sales"], reverse=True)

    return SalesReport(
        day=day_total,
        month=month_total,
        year=year_total,
        by_month=[MonthTotal(month=label, total=total) for label, total in by_month.items()],
        products=[ProductSales(**entry) for entry in ranked],
    )


class OrderService:
    """
    Serwis odpowiedzialny za zamowienia w panelu admina.
    Zamowienia tworzy checkout (zewnetrzny), tutaj: lista, dostarczenie, usuwanie, raport.
    """

    def __init__(self, store: DocumentStore, notification_service: Optional[NotificationService] = None):
        self.store = store
        self.notification_service = notification_service or NotificationService()

    def list_orders(self) -> List[Order]:
        orders = []
        for doc in self.store.list_documents(ORDERS):
            try:
                orders.append(Order.model_validate(doc))
            except ValidationError as e:
                logger.warning(f"Skipping malformed order {doc.get('id')!r}: {e}")
        return orders

    def get_order(self, order_id: str) -> Order:
        doc = self.store.get_document(ORDERS, order_id)
        if doc is None:
            raise NotFoundError(f"Order {order_id} not found")
        return Order.model_validate(doc)

    def mark_delivered(self, order_id: str) -> Order:
        """
        Use Case: oznaczenie zamowienia jako dostarczone.
        Dowod przelewu jest usuwany z dokumentu, klient dostaje powiadomienie.
        """
        order = self.get_order(order_id)

        self.store.update_document(
            ORDERS,
            order_id,
            {"status": DELIVERED, "bankTransferProofBase64": None},
        )
        logger.info(f"Order {order_id} marked as delivered and bank transfer proof removed")

        self.notification_service.send_order_delivered(order_id, order.email)
        return self.get_order(order_id)

    def delete_order(self, order_id: str) -> None:
        self.get_order(order_id)
        self.store.delete_document(ORDERS, order_id)
        logger.info(f"Order {order_id} deleted")

    def sales_report(self, now: Optional[datetime] = None) -> SalesReport:
        return build_sales_report(self.list_orders(), now or now_utc())
