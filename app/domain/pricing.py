# app/domain/pricing.py
"""
Rozwiazywanie rabatow i wyliczanie cen.

Ten sam zestaw funkcji liczy cene na stronie produktu, w widoku
magazynu admina i w podgladzie nowego rabatu, wiec wszedzie wychodzi
identyczna kwota.

Rabat jest aktywny dla produktu P w chwili T gdy:
    isActive == True  i  P.id in productIds  i  startDate <= T <= endDate
(okno domkniete z obu stron).
"""
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from app.domain.schemas import Discount, PriceQuote, Product
from app.utils.dates import to_date
from app.utils.logging import get_logger
from app.utils.money import apply_percentage_off

logger = get_logger(__name__)

DiscountLike = Union[Discount, Mapping]

STATUS_DISABLED = "Disabled"
STATUS_SCHEDULED = "Scheduled"
STATUS_ACTIVE = "Active"
STATUS_EXPIRED = "Expired"
STATUS_INVALID = "Invalid"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def coerce_discount(raw: Any, warn: bool = True) -> Optional[Discount]:
    """Parse a discount document; malformed ones come back as ``None``."""
    if isinstance(raw, Discount):
        return raw

    try:
        return Discount.model_validate(raw)
    except (ValidationError, TypeError, ValueError) as e:
        if warn:
            doc_id = raw.get("id") if isinstance(raw, Mapping) else None
            logger.warning(f"Ignoring malformed discount {doc_id!r}: {e}")
        return None


def parse_discounts(raw_discounts: Iterable[Any]) -> list[Discount]:
    parsed = []
    for raw in raw_discounts:
        discount = coerce_discount(raw)
        if discount is not None:
            parsed.append(discount)
    return parsed


def snapshot_order_key(raw: Any) -> tuple:
    """
    Kolejnosc snapshotu rabatow: priority malejaco, createdAt malejaco, id.
    Pierwszy pasujacy rabat wygrywa, wiec ta kolejnosc jest regula biznesowa.
    """
    if isinstance(raw, Discount):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return (0, 0.0, "")

    try:
        priority = int(raw.get("priority") or 0)
    except (TypeError, ValueError, OverflowError):
        priority = 0

    try:
        created = to_date(raw.get("createdAt"))
    except (TypeError, ValueError, OverflowError):
        created = _EPOCH

    return (-priority, -created.timestamp(), str(raw.get("id", "")))


def is_active(discount: DiscountLike, now: Any) -> bool:
    """Enabled and ``start <= now <= end``. Malformed discounts are never active."""
    parsed = coerce_discount(discount)
    if parsed is None or not parsed.is_active:
        return False

    moment = to_date(now)
    return parsed.start_date <= moment <= parsed.end_date


def _product_id(product: Union[Product, Mapping, str]) -> str:
    if isinstance(product, Product):
        return product.id
    if isinstance(product, Mapping):
        return str(product.get("id"))
    return str(product)


def resolve_active_discount(
    product: Union[Product, Mapping, str],
    discounts: Iterable[DiscountLike],
    now: Any,
) -> Optional[Discount]:
    """First discount in snapshot order that is active and targets ``product``."""
    product_id = _product_id(product)

    for raw in discounts:
        discount = coerce_discount(raw)
        if discount is None:
            continue
        if product_id in discount.product_ids and is_active(discount, now):
            return discount

    return None


def compute_discounted_price(
    price: int,
    discount: Union[Discount, float, int, Decimal, None],
) -> int:
    if discount is None:
        return price

    percentage = discount.discount_percentage if isinstance(discount, Discount) else discount
    discounted = apply_percentage_off(price, percentage)

    #zawsze w [0, price]
    return max(0, min(price, discounted))


def compute_savings(price: int, discounted_price: int, quantity: int) -> int:
    return (price - discounted_price) * quantity


def discount_status(discount: DiscountLike, now: Any) -> str:
    parsed = coerce_discount(discount)
    if parsed is None:
        return STATUS_INVALID
    if not parsed.is_active:
        return STATUS_DISABLED

    moment = to_date(now)
    if moment < parsed.start_date:
        return STATUS_SCHEDULED
    if moment > parsed.end_date:
        return STATUS_EXPIRED
    return STATUS_ACTIVE


def quote(
    product: Product,
    discounts: Iterable[DiscountLike],
    now: Any,
    quantity: int = 1,
) -> PriceQuote:
    active = resolve_active_discount(product, discounts, now)
    discounted = compute_discounted_price(product.price, active)

    return PriceQuote(
        product_id=product.id,
        price=product.price,
        discounted_price=discounted,
        discount_id=active.id if active else None,
        discount_percentage=active.discount_percentage if active else None,
        description=(active.description or None) if active else None,
        ends_at=active.end_date if active else None,
        quantity=quantity,
        savings=compute_savings(product.price, discounted, quantity),
    )
