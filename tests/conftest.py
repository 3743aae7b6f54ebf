"""
Pytest configuration and fixtures for the storefront service tests.
"""
import os

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import pytest

from app.data.database import Base, SessionLocal, engine
from app.data.models import DocumentModel  # noqa: F401
from app.domain.errors import StorageError
from app.services.document_store import DISCOUNTS, PRODUCTS, SERVER_TIMESTAMP, DocumentStore
from app.services.live_catalog import LiveCatalog
from app.services.storage import KeyValueStorage

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage scope for tests."""

    def __init__(self, name: str = "memory"):
        self.name = name
        self.items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class BrokenStorage(KeyValueStorage):
    """Storage scope that fails like a disabled or full browser store."""

    name = "broken"

    def get_item(self, key: str) -> Optional[str]:
        raise StorageError("storage disabled")

    def set_item(self, key: str, value: str) -> None:
        raise StorageError("quota exceeded")

    def remove_item(self, key: str) -> None:
        raise StorageError("storage disabled")


@pytest.fixture
def db_engine():
    """Fresh schema in the shared in-memory database."""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_engine) -> DocumentStore:
    return DocumentStore(SessionLocal)


@pytest.fixture
def catalog(store):
    live = LiveCatalog(store)
    live.start()
    yield live
    live.stop()


@pytest.fixture
def make_product(store):
    """Insert a product document and return its id."""

    def _make(**overrides) -> str:
        fields = {
            "title": "Rose Lawn Suit",
            "price": 1000,
            "category": "Casual",
            "description": "Three piece lawn suit",
            "coverImage": "https://cdn.example.com/rose.jpg",
            "images": ["https://cdn.example.com/rose-1.jpg"],
            "available": True,
            "variations": [],
            "sizes": [],
            "isTopProduct": False,
            "createdAt": SERVER_TIMESTAMP,
        }
        fields.update(overrides)
        return store.add_document(PRODUCTS, fields)

    return _make


@pytest.fixture
def make_discount(store):
    """Insert a discount document (20% off, window around NOW) and return its id."""

    def _make(product_ids, **overrides) -> str:
        fields = {
            "productIds": list(product_ids),
            "discountPercentage": 20,
            "startDate": NOW - timedelta(days=1),
            "endDate": NOW + timedelta(days=1),
            "description": "Summer sale",
            "isActive": True,
            "createdAt": SERVER_TIMESTAMP,
        }
        fields.update(overrides)
        return store.add_document(DISCOUNTS, fields)

    return _make
