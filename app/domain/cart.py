# app/domain/cart.py
"""
Czyste operacje na koszyku.

Dwa rodzaje tozsamosci pozycji:
- MergeKey (productId, variation, size) decyduje tylko o scalaniu przy "add to cart",
- EntryId nadawany raz przy tworzeniu pozycji, uzywany do usuwania i zmiany ilosci.

Zadna funkcja nie modyfikuje listy wejsciowej.
"""
import uuid
from datetime import datetime
from typing import List, NamedTuple, Optional, Sequence

from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.pricing import compute_savings
from app.domain.schemas import CartItem, PriceQuote, Product

Cart = List[CartItem]


class MergeKey(NamedTuple):
    product_id: str
    variation: Optional[str]
    size: Optional[str]


def merge_key(item: CartItem) -> MergeKey:
    return MergeKey(item.product_id, item.variation, item.size)


def new_entry_id(
    product_id: str,
    variation: Optional[str] = None,
    size: Optional[str] = None,
    token: Optional[str] = None,
) -> str:
    parts = [product_id]
    if variation:
        parts.append(variation)
    if size:
        parts.append(size)
    parts.append(token or uuid.uuid4().hex[:12])
    return "_".join(parts)


def build_item(
    product: Product,
    pricing: PriceQuote,
    quantity: int,
    variation: Optional[str],
    size: Optional[str],
    created_at: datetime,
    entry_id: Optional[str] = None,
) -> CartItem:
    return CartItem(
        id=entry_id or new_entry_id(product.id, variation, size),
        product_id=product.id,
        title=product.title,
        price=pricing.discounted_price,
        original_price=product.price,
        image=product.cover_image,
        quantity=quantity,
        variation=variation,
        size=size,
        discount_applied=pricing.discount_percentage,
        created_at=created_at,
    )


def add_item(cart: Sequence[CartItem], new_item: CartItem) -> Cart:
    key = merge_key(new_item)

    for index, existing in enumerate(cart):
        if merge_key(existing) == key:
            #cena zostaje z pierwszego dodania, rosnie tylko ilosc
            merged = existing.model_copy(update={"quantity": existing.quantity + new_item.quantity})
            return [*cart[:index], merged, *cart[index + 1:]]

    return [*cart, new_item]


def _index_of(cart: Sequence[CartItem], entry_id: str) -> int:
    for index, item in enumerate(cart):
        if item.id == entry_id:
            return index
    raise NotFoundError(f"Cart item {entry_id} not found")


def remove_item(cart: Sequence[CartItem], entry_id: str) -> Cart:
    index = _index_of(cart, entry_id)
    return [*cart[:index], *cart[index + 1:]]


def update_quantity(cart: Sequence[CartItem], entry_id: str, quantity: int) -> Cart:
    """Ilosc 0 usuwa pozycje, ujemna jest odrzucana."""
    if quantity < 0:
        raise ValidationFailure("Quantity cannot be negative.")

    if quantity == 0:
        return remove_item(cart, entry_id)

    index = _index_of(cart, entry_id)
    updated = cart[index].model_copy(update={"quantity": quantity})
    return [*cart[:index], updated, *cart[index + 1:]]


def clear_cart() -> Cart:
    return []


def cart_totals(cart: Sequence[CartItem]) -> dict:
    return {
        "count": sum(item.quantity for item in cart),
        "subtotal": sum(item.price * item.quantity for item in cart),
        "savings": sum(
            compute_savings(item.original_price, item.price, item.quantity) for item in cart
        ),
    }
