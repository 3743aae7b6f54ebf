# app/domain/schemas.py
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.utils.dates import to_date

#kazda data z magazynu przechodzi przez to_date
Timestamp = Annotated[datetime, BeforeValidator(to_date)]


def _labels(value) -> List[str]:
    #null albo puste stringi z formularza -> brak opcji
    seen = []
    for label in value or []:
        label = str(label).strip()
        if label and label not in seen:
            seen.append(label)
    return seen


class StoreModel(BaseModel):
    """Bazowy model: pola snake_case w Pythonie, camelCase w dokumentach i JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =====================================================
# CATALOG
# =====================================================
class Product(StoreModel):
    id: str
    title: str
    price: int = Field(..., ge=0)
    category: str = ""
    description: str = ""
    cover_image: str = ""
    images: List[str] = Field(default_factory=list)
    available: bool = True
    variations: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    is_top_product: bool = False
    created_at: Optional[Timestamp] = None

    @field_validator("images", "variations", "sizes", mode="before")
    @classmethod
    def _clean_labels(cls, value):
        return _labels(value)


class ProductIn(StoreModel):
    """Schema dla tworzenia produktu (panel admina)."""

    title: str = Field(..., min_length=1, max_length=200)
    price: int = Field(..., ge=0, description="Cena w PKR, liczba calkowita")
    category: str = Field(..., min_length=1)
    description: str = ""
    cover_image: str = Field(..., min_length=1)
    images: List[str] = Field(default_factory=list)
    available: bool = True
    variations: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    is_top_product: bool = False

    @field_validator("images", "variations", "sizes", mode="before")
    @classmethod
    def _clean_labels(cls, value):
        return _labels(value)


class ProductUpdate(StoreModel):
    """Schema dla czesciowej edycji produktu."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    cover_image: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None
    available: Optional[bool] = None
    variations: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    is_top_product: Optional[bool] = None

    #pominiete pole = bez zmian, jawny null jest bledem
    @field_validator(
        "title", "price", "category", "description", "cover_image", "available", "is_top_product",
        mode="before",
    )
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value

    @field_validator("images", "variations", "sizes", mode="before")
    @classmethod
    def _clean_labels(cls, value):
        return None if value is None else _labels(value)


# =====================================================
# DISCOUNTS
# =====================================================
class Discount(StoreModel):
    id: str
    product_ids: List[str]
    discount_percentage: float = Field(..., gt=0, le=100)
    start_date: Timestamp
    end_date: Timestamp
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[Timestamp] = None
    priority: int = 0


class DiscountIn(StoreModel):
    """
    Schema dla tworzenia rabatu.
    Reguly biznesowe (produkty, procent, daty) sprawdza DiscountService,
    zeby zwrocic komunikat gotowy do wyswietlenia.
    """

    product_ids: List[str] = Field(default_factory=list)
    discount_percentage: Optional[float] = None
    start_date: Timestamp
    end_date: Timestamp
    description: str = ""
    priority: int = 0


class DiscountPreviewIn(StoreModel):
    product_ids: List[str] = Field(default_factory=list)
    discount_percentage: float = Field(..., gt=0, le=100)


class DiscountPreview(StoreModel):
    product_id: str
    title: str
    price: int
    discounted_price: int


class DiscountView(StoreModel):
    discount: Discount
    status: str
    active: bool
    previews: List[DiscountPreview] = Field(default_factory=list)


class PriceQuote(StoreModel):
    """Cena produktu po rozwiazaniu rabatu w danej chwili."""

    product_id: str
    price: int
    discounted_price: int
    discount_id: Optional[str] = None
    discount_percentage: Optional[float] = None
    description: Optional[str] = None
    ends_at: Optional[datetime] = None
    quantity: int = 1
    savings: int = 0


class ProductView(StoreModel):
    product: Product
    pricing: PriceQuote


# =====================================================
# CART
# =====================================================
class CartItem(StoreModel):
    id: str
    product_id: str
    title: str
    price: int = Field(..., ge=0)
    original_price: int = Field(..., ge=0)
    image: str = ""
    quantity: int = Field(..., gt=0)
    variation: Optional[str] = None
    size: Optional[str] = None
    discount_applied: Optional[float] = Field(None, gt=0, le=100)
    created_at: Timestamp

    @model_validator(mode="after")
    def _price_within_original(self):
        if self.price > self.original_price:
            raise ValueError("price cannot exceed originalPrice")
        return self


#ten sam ksztalt, inny cykl zycia (sesja, nadpisywany przy kazdym "buy now")
BuyNowItem = CartItem


class AddToCartIn(StoreModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")
    variation: Optional[str] = None
    size: Optional[str] = None


class QuantityIn(StoreModel):
    quantity: int


class CartOut(StoreModel):
    items: List[CartItem]
    count: int
    subtotal: int
    savings: int


# =====================================================
# ORDERS & CONTACTS
# =====================================================
class OrderItem(StoreModel):
    product_id: Optional[str] = None
    title: str = ""
    type: Optional[str] = None
    variation: Optional[str] = None
    size: Optional[str] = None
    price: float = 0
    quantity: int = 0


class ShippingAddress(StoreModel):
    full_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None


class Order(StoreModel):
    id: str
    items: List[OrderItem] = Field(default_factory=list)
    total: float = 0
    status: str = "pending"
    payment: Optional[str] = None
    shipping: Optional[str] = None
    promo_code: Optional[str] = None
    notes: Optional[str] = None
    email: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    bank_transfer_proof_base64: Optional[str] = None
    created_at: Optional[Timestamp] = None

    @field_validator("items", mode="before")
    @classmethod
    def _no_items(cls, value):
        return value or []

    @field_validator("total", mode="before")
    @classmethod
    def _no_total(cls, value):
        return value or 0


class MonthTotal(StoreModel):
    month: str
    total: float


class ProductSales(StoreModel):
    title: str
    total_qty: int
    total_sales: float


class SalesReport(StoreModel):
    day: float
    month: float
    year: float
    by_month: List[MonthTotal]
    products: List[ProductSales]


class Contact(StoreModel):
    id: str
    name: str = ""
    email: str = ""
    message: str = ""
    timestamp: Optional[Timestamp] = None


class ContactIn(StoreModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=200, pattern=r"^[^@\s]+@[^@\s]+$")
    message: str = Field(..., min_length=1, max_length=5000)
