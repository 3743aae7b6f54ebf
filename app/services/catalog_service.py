# app/services/catalog_service.py
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from app.domain.errors import NotFoundError, ValidationFailure
from app.domain.schemas import Product, ProductIn, ProductUpdate, ProductView
from app.services.document_store import PRODUCTS, SERVER_TIMESTAMP, DocumentStore
from app.services.live_catalog import LiveCatalog
from app.utils.dates import now_utc
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Produkty: widok kupujacego (lista, szczegoly z cena) i CRUD admina.
    Odczyty ida z zywego snapshotu, zapisy do magazynu dokumentow.
    """

    def __init__(self, store: DocumentStore, catalog: LiveCatalog):
        self.store = store
        self.catalog = catalog

    #query
    def list_products(
        self,
        category: Optional[str] = None,
        featured: bool = False,
        now: Optional[datetime] = None,
    ) -> List[ProductView]:
        now = now or now_utc()
        products = self.catalog.list_products()

        if category:
            wanted = category.strip().lower()
            products = [p for p in products if p.category.strip().lower() == wanted]
        if featured:
            products = [p for p in products if p.is_top_product]

        return [ProductView(product=p, pricing=self.catalog.quote(p, now)) for p in products]

    def get_product(self, product_id: str, now: Optional[datetime] = None, quantity: int = 1) -> ProductView:
        if quantity <= 0:
            raise ValidationFailure("Quantity must be at least 1.")

        doc = self.store.get_document(PRODUCTS, product_id)
        if doc is None:
            raise NotFoundError(f"Product {product_id} not found")

        product = Product.model_validate(doc)
        return ProductView(product=product, pricing=self.catalog.quote(product, now or now_utc(), quantity))

    def inventory(self, now: Optional[datetime] = None) -> List[ProductView]:
        """Widok magazynu admina: kazdy produkt z aktywnym rabatem i cena po rabacie."""
        return self.list_products(now=now)

    #commands
    def create_product(self, payload: ProductIn) -> Product:
        fields = payload.model_dump(by_alias=True)
        fields["createdAt"] = SERVER_TIMESTAMP

        product_id = self.store.add_document(PRODUCTS, fields)
        logger.info(f"Product {product_id} '{payload.title}' created")
        return Product.model_validate(self.store.get_document(PRODUCTS, product_id))

    def update_product(self, product_id: str, payload: ProductUpdate) -> Product:
        changes = payload.model_dump(by_alias=True, exclude_unset=True)
        if not changes:
            raise ValidationFailure("Nothing to update.")

        doc = self.store.get_document(PRODUCTS, product_id)
        if doc is None:
            raise NotFoundError(f"Product {product_id} not found")

        #walidacja calego dokumentu przed zapisem
        try:
            Product.model_validate({**doc, **changes})
        except ValidationError as e:
            raise ValidationFailure(f"Invalid product update: {e.errors()[0]['msg']}") from e

        self.store.update_document(PRODUCTS, product_id, changes)
        logger.info(f"Product {product_id} updated")
        return Product.model_validate(self.store.get_document(PRODUCTS, product_id))

    def delete_product(self, product_id: str) -> None:
        if self.store.get_document(PRODUCTS, product_id) is None:
            raise NotFoundError(f"Product {product_id} not found")

        self.store.delete_document(PRODUCTS, product_id)
        logger.info(f"Product {product_id} deleted")
