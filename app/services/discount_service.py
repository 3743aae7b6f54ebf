# app/services/discount_service.py
import math
from datetime import datetime
from typing import List, Optional

from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.pricing import coerce_discount, compute_discounted_price, discount_status, is_active
from app.domain.schemas import Discount, DiscountIn, DiscountPreview, DiscountView
from app.services.document_store import DISCOUNTS, SERVER_TIMESTAMP, DocumentStore
from app.services.live_catalog import LiveCatalog
from app.utils.dates import now_utc
from app.utils.logging import get_logger

logger = get_logger(__name__)


def validate_discount(payload: DiscountIn) -> None:
    """
    Reguly rabatu sprawdzane przed zapisem:
    - co najmniej jeden produkt
    - procent w (0, 100]
    - koniec okna po poczatku
    """
    if not payload.product_ids:
        raise ValidationFailure("Please select at least one product.")

    pct = payload.discount_percentage
    if pct is None or not math.isfinite(pct) or pct <= 0 or pct > 100:
        raise ValidationFailure("Please enter a valid discount percentage (1-100).")

    if payload.end_date <= payload.start_date:
        raise ValidationFailure("End date must be after start date.")


class DiscountService:
    def __init__(self, store: DocumentStore, catalog: LiveCatalog):
        self.store = store
        self.catalog = catalog

    # =====================================================
    # QUERY
    # =====================================================
    def list_discounts(self, now: Optional[datetime] = None) -> List[DiscountView]:
        """Rabaty od najnowszego, ze statusem i podgladem cen produktow."""
        now = now or now_utc()
        discounts = sorted(
            self.catalog.list_discounts(),
            key=lambda d: (d.created_at is not None, d.created_at),
            reverse=True,
        )

        return [
            DiscountView(
                discount=discount,
                status=discount_status(discount, now),
                active=is_active(discount, now),
                previews=self.preview(discount.product_ids, discount.discount_percentage),
            )
            for discount in discounts
        ]

    def preview(self, product_ids: List[str], discount_percentage: float) -> List[DiscountPreview]:
        previews = []
        for product_id in product_ids:
            product = self.catalog.product(product_id)
            if product is None:
                continue
            previews.append(
                DiscountPreview(
                    product_id=product.id,
                    title=product.title,
                    price=product.price,
                    discounted_price=compute_discounted_price(product.price, discount_percentage),
                )
            )
        return previews

    def get_discount(self, discount_id: str) -> Discount:
        doc = self.store.get_document(DISCOUNTS, discount_id)
        if doc is None:
            raise NotFoundError(f"Discount {discount_id} not found")

        discount = coerce_discount(doc)
        if discount is None:
            raise ValidationFailure(f"Discount {discount_id} is malformed and never applies.")
        return discount

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_discount(self, payload: DiscountIn) -> Discount:
        validate_discount(payload)

        unknown = [pid for pid in payload.product_ids if self.catalog.product(pid) is None]
        if unknown:
            logger.warning(f"Discount targets products missing from the catalog: {unknown}")

        discount_id = self.store.add_document(
            DISCOUNTS,
            {
                "productIds": list(payload.product_ids),
                "discountPercentage": float(payload.discount_percentage),
                "startDate": payload.start_date,
                "endDate": payload.end_date,
                "description": payload.description,
                "priority": payload.priority,
                "isActive": True,
                "createdAt": SERVER_TIMESTAMP,
            },
        )

        logger.info(
            f"Discount {discount_id} created: {payload.discount_percentage}% off "
            f"{len(payload.product_ids)} product(s)"
        )
        return self.get_discount(discount_id)

    def toggle_discount(self, discount_id: str) -> Discount:
        doc = self.store.get_document(DISCOUNTS, discount_id)
        if doc is None:
            raise NotFoundError(f"Discount {discount_id} not found")

        enabled = not bool(doc.get("isActive"))
        self.store.update_document(DISCOUNTS, discount_id, {"isActive": enabled})

        logger.info(f"Discount {discount_id} {'enabled' if enabled else 'disabled'}")
        return self.get_discount(discount_id)

    def delete_discount(self, discount_id: str) -> None:
        if self.store.get_document(DISCOUNTS, discount_id) is None:
            raise NotFoundError(f"Discount {discount_id} not found")

        self.store.delete_document(DISCOUNTS, discount_id)
        logger.info(f"Discount {discount_id} deleted")
