"""
Tests for admin order handling and the sales report.
"""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from app.domain.errors import NotFoundError
from app.domain.schemas import Order
from app.services.document_store import ORDERS
from app.services.order_service import DELIVERED, OrderService, build_sales_report
from tests.conftest import NOW


@pytest.fixture
def notifications():
    return MagicMock()


@pytest.fixture
def service(store, notifications):
    return OrderService(store, notification_service=notifications)


def order(order_id, created_at, total, items=()) -> Order:
    return Order.model_validate(
        {"id": order_id, "createdAt": created_at, "total": total, "items": list(items)}
    )


class TestSalesReport:
    def test_period_totals(self):
        orders = [
            order("today", NOW - timedelta(hours=1), 1000),
            order("this-month", NOW.replace(day=2), 500),
            order("this-year", NOW.replace(month=1, day=20), 250),
            order("last-year", NOW.replace(year=NOW.year - 1), 4000),
        ]

        report = build_sales_report(orders, NOW)

        assert report.day == 1000
        assert report.month == 1500
        assert report.year == 1750

    def test_month_labels_and_product_ranking(self):
        orders = [
            order("a", NOW, 3000, [
                {"productId": "p1", "title": "Kurta", "price": 1000, "quantity": 1},
                {"productId": "p2", "title": "Shawl", "price": 2000, "quantity": 1},
            ]),
            order("b", NOW.replace(month=1), 2000, [
                {"productId": "p1", "title": "Kurta", "price": 1000, "quantity": 2},
                {"title": "Dupatta", "type": "silk", "size": "free", "price": 0, "quantity": 1},
            ]),
        ]

        report = build_sales_report(orders, NOW)

        assert [(m.month, m.total) for m in report.by_month] == [("Jun", 3000), ("Jan", 2000)]
        assert [(p.title, p.total_qty, p.total_sales) for p in report.products] == [
            ("Kurta", 3, 3000),
            ("Shawl", 1, 2000),
            ("Dupatta", 1, 0),
        ]

    def test_order_without_date_counts_as_today(self):
        report = build_sales_report([order("x", None, 700)], NOW)

        assert report.day == 700


class TestAdminOrders:
    def test_mark_delivered(self, service, store, notifications):
        order_id = store.add_document(
            ORDERS,
            {"status": "pending", "payment": "EasyPaisa", "bankTransferProofBase64": "data:image/png;base64,AAA", "email": "sana@example.com", "total": 1500},
        )

        delivered = service.mark_delivered(order_id)

        assert delivered.status == DELIVERED
        assert delivered.bank_transfer_proof_base64 is None
        notifications.send_order_delivered.assert_called_once_with(order_id, "sana@example.com")

    def test_mark_delivered_missing(self, service, notifications):
        with pytest.raises(NotFoundError):
            service.mark_delivered("missing")
        notifications.send_order_delivered.assert_not_called()

    def test_delete(self, service, store):
        order_id = store.add_document(ORDERS, {"status": "pending", "total": 10})

        service.delete_order(order_id)

        assert service.list_orders() == []

    def test_malformed_orders_skipped(self, service, store):
        store.add_document(ORDERS, {"items": "not-a-list"})
        store.add_document(ORDERS, {"total": 50, "items": None})
        store.add_document(ORDERS, {"total": 70, "createdAt": {"seconds": None}})

        orders = service.list_orders()

        assert len(orders) == 1
        assert orders[0].total == 50
