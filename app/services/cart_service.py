# app/services/cart_service.py
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import redis
from pydantic import ValidationError

from app.domain import cart as cart_ops
from app.domain.errors import NotFoundError, StorageError, ValidationFailure
from app.domain.schemas import BuyNowItem, CartItem, Product
from app.services.document_store import PRODUCTS, DocumentStore
from app.services.live_catalog import LiveCatalog
from app.services.storage import KeyValueStorage
from app.utils.dates import now_utc
from app.utils.logging import get_logger

logger = get_logger(__name__)

CART_KEY = "cartItems"
BUY_NOW_KEY = "buyNowItem"

#bledy magazynu klucz/wartosc nigdy nie wychodza poza CartStore
_STORAGE_ERRORS = (redis.RedisError, StorageError, OSError)


class CartStore:
    """
    Koszyk zapisywany do dwoch niezaleznych zakresow naraz (persistent + session).
    Odczyt z pierwszego dostepnego, persistent ma pierwszenstwo.
    Bledy odczytu/parsowania -> pusty koszyk, bledy zapisu -> log i dalej.
    """

    def __init__(self, persistent: KeyValueStorage, session: KeyValueStorage):
        self.persistent = persistent
        self.session = session

    def _read(self, scope: KeyValueStorage, key: str) -> Optional[str]:
        try:
            return scope.get_item(key)
        except _STORAGE_ERRORS as e:
            logger.warning(f"Cannot read {key} from {scope.name}: {e}")
            return None

    def _write(self, scope: KeyValueStorage, key: str, value: str) -> bool:
        try:
            scope.set_item(key, value)
            return True
        except _STORAGE_ERRORS as e:
            logger.warning(f"Cannot write {key} to {scope.name}: {e}")
            return False

    # =====================================================
    # CART
    # =====================================================
    def load_cart(self) -> List[CartItem]:
        for scope in (self.persistent, self.session):
            raw = self._read(scope, CART_KEY)
            if raw is None:
                continue

            try:
                entries = json.loads(raw)
                if not isinstance(entries, list):
                    raise ValueError("cart payload is not a list")
                return [CartItem.model_validate(entry) for entry in entries]
            except (ValueError, TypeError, ValidationError) as e:
                logger.warning(f"Discarding unreadable cart from {scope.name}: {e}")
                return []

        return []

    def save_cart(self, cart: List[CartItem]) -> None:
        payload = json.dumps([item.model_dump(mode="json", by_alias=True) for item in cart])

        written = [self._write(scope, CART_KEY, payload) for scope in (self.persistent, self.session)]
        if not any(written):
            logger.warning(f"Cart of {len(cart)} items was not persisted to any scope")

    def add_item(self, item: CartItem) -> List[CartItem]:
        cart = cart_ops.add_item(self.load_cart(), item)
        self.save_cart(cart)
        return cart

    def remove_item(self, entry_id: str) -> List[CartItem]:
        cart = cart_ops.remove_item(self.load_cart(), entry_id)
        self.save_cart(cart)
        return cart

    def update_quantity(self, entry_id: str, quantity: int) -> List[CartItem]:
        cart = cart_ops.update_quantity(self.load_cart(), entry_id, quantity)
        self.save_cart(cart)
        return cart

    def clear_cart(self) -> List[CartItem]:
        cart = cart_ops.clear_cart()
        self.save_cart(cart)
        return cart

    # =====================================================
    # BUY NOW
    # =====================================================
    def save_buy_now(self, item: BuyNowItem) -> None:
        payload = json.dumps(item.model_dump(mode="json", by_alias=True))
        self._write(self.session, BUY_NOW_KEY, payload)

    def load_buy_now(self) -> Optional[BuyNowItem]:
        raw = self._read(self.session, BUY_NOW_KEY)
        if raw is None:
            return None
        try:
            return BuyNowItem.model_validate(json.loads(raw))
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable buy-now item: {e}")
            return None


class CartService:
    """
    Use case'y koszyka po stronie kupujacego:
    commands (add, buy now, change quantity, remove, clear) i query (get).
    """

    def __init__(self, store: DocumentStore, catalog: LiveCatalog, cart_store: CartStore):
        self.store = store
        self.catalog = catalog
        self.cart_store = cart_store

    #query - odczyt
    def get_cart(self) -> Dict[str, Any]:
        return self._summary(self.cart_store.load_cart())

    def get_buy_now(self) -> BuyNowItem:
        item = self.cart_store.load_buy_now()
        if item is None:
            raise NotFoundError("No buy-now item in this session")
        return item

    #commands
    def add_product(
        self,
        product_id: str,
        quantity: int = 1,
        variation: Optional[str] = None,
        size: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        item = self._prepare_item(product_id, quantity, variation, size, now or now_utc())

        logger.info(
            f"Adding {item.quantity} x {item.product_id} "
            f"({item.variation}/{item.size}) at {item.price}"
        )
        return self._summary(self.cart_store.add_item(item))

    def buy_now(
        self,
        product_id: str,
        quantity: int = 1,
        variation: Optional[str] = None,
        size: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BuyNowItem:
        item = self._prepare_item(product_id, quantity, variation, size, now or now_utc())
        #buy-now nie trafia do koszyka, id = id produktu
        item = item.model_copy(update={"id": item.product_id})

        self.cart_store.save_buy_now(item)
        logger.info(f"Buy-now item set to {item.quantity} x {item.product_id}")
        return item

    def change_quantity(self, entry_id: str, quantity: int) -> Dict[str, Any]:
        return self._summary(self.cart_store.update_quantity(entry_id, quantity))

    def remove_entry(self, entry_id: str) -> Dict[str, Any]:
        return self._summary(self.cart_store.remove_item(entry_id))

    def clear(self) -> Dict[str, Any]:
        return self._summary(self.cart_store.clear_cart())

    # =====================================================
    # HELPERS
    # =====================================================
    def _load_product(self, product_id: str) -> Product:
        doc = self.store.get_document(PRODUCTS, product_id)
        if doc is None:
            raise NotFoundError(f"Product {product_id} not found")
        return Product.model_validate(doc)

    def _prepare_item(
        self,
        product_id: str,
        quantity: int,
        variation: Optional[str],
        size: Optional[str],
        now: datetime,
    ) -> CartItem:
        if quantity <= 0:
            raise ValidationFailure("Quantity must be at least 1.")

        product = self._load_product(product_id)
        if not product.available:
            raise ValidationFailure(f"{product.title} is currently unavailable.")

        variation = _select_option(variation, product.variations, "color")
        size = _select_option(size, product.sizes, "size")

        pricing = self.catalog.quote(product, now, quantity)
        return cart_ops.build_item(product, pricing, quantity, variation, size, now)

    @staticmethod
    def _summary(cart: List[CartItem]) -> Dict[str, Any]:
        return {"items": cart, **cart_ops.cart_totals(cart)}


def _select_option(chosen: Optional[str], offered: List[str], label: str) -> Optional[str]:
    """Brak opcji w produkcie -> None; brak wyboru -> pierwsza opcja."""
    if not offered:
        if chosen:
            raise ValidationFailure(f"This product has no {label} options.")
        return None

    if not chosen:
        return offered[0]

    if chosen not in offered:
        raise ValidationFailure(f"Unknown {label} '{chosen}'. Choose one of: {', '.join(offered)}.")
    return chosen
