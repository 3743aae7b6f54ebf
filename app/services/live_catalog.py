# app/services/live_catalog.py
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from app.domain.pricing import parse_discounts, quote, snapshot_order_key
from app.domain.schemas import Discount, PriceQuote, Product
from app.domain.snapshots import CollectionCache, Derived
from app.services.document_store import DISCOUNTS, PRODUCTS, DocumentStore
from app.utils.logging import get_logger

logger = get_logger(__name__)


def index_discounts(docs: Sequence[Any]) -> Dict[str, Tuple[Discount, ...]]:
    """productId -> rabaty w kolejnosci snapshotu (bez uszkodzonych dokumentow)."""
    index: Dict[str, List[Discount]] = {}
    for discount in parse_discounts(docs):
        for product_id in discount.product_ids:
            index.setdefault(product_id, []).append(discount)
    return {product_id: tuple(found) for product_id, found in index.items()}


def index_products(docs: Sequence[Any]) -> Dict[str, Product]:
    products: Dict[str, Product] = {}
    for doc in docs:
        try:
            product = Product.model_validate(doc)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed product {doc.get('id')!r}: {e}")
            continue
        products[product.id] = product
    return products


class LiveCatalog:
    """
    Lokalne kopie kolekcji products i discounts trzymane na biezaco
    przez subskrypcje magazynu. Indeksy sa wartosciami pochodnymi,
    przeliczanymi gdy zmieni sie snapshot (w dowolnej kolejnosci).
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.products = CollectionCache(PRODUCTS)
        self.discounts = CollectionCache(DISCOUNTS, order_key=snapshot_order_key)

        self._products_by_id = Derived(index_products, self.products)
        self._discounts_by_product = Derived(index_discounts, self.discounts)
        self._all_discounts = Derived(parse_discounts, self.discounts)

        self._unsubscribes: List[Callable[[], None]] = []

    @property
    def running(self) -> bool:
        return bool(self._unsubscribes)

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting live catalog subscriptions")
        self._unsubscribes = [
            self.store.subscribe_to_collection(PRODUCTS, self.products),
            self.store.subscribe_to_collection(DISCOUNTS, self.discounts),
        ]

    def stop(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []
        logger.info("Live catalog subscriptions closed")

    # =====================================================
    # QUERY
    # =====================================================
    def product(self, product_id: str) -> Optional[Product]:
        return self._products_by_id.get().get(product_id)

    def list_products(self) -> List[Product]:
        return list(self._products_by_id.get().values())

    def list_discounts(self) -> List[Discount]:
        return list(self._all_discounts.get())

    def discounts_for(self, product_id: str) -> Tuple[Discount, ...]:
        return self._discounts_by_product.get().get(product_id, ())

    def quote(self, product: Product, now: Any, quantity: int = 1) -> PriceQuote:
        return quote(product, self.discounts_for(product.id), now, quantity)
