# app/services/document_store.py
"""
Magazyn dokumentow: kolekcje products, discounts, orders, contacts.

Operacje:
- get_document / list_documents (odczyt),
- add_document / update_document / delete_document (zapis, bez ponawiania),
- subscribe_to_collection: subskrybent dostaje od razu aktualny snapshot,
  a potem pelny snapshot kolekcji po kazdym zapisie do niej.

Znaczniki czasu wracaja jako StoreTimestamp (z metoda to_date()).
"""
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.document import DocumentModel
from app.domain.errors import NotFoundError, StoreWriteError
from app.repos.document_repo import DocumentRepo
from app.utils.dates import now_utc, to_date
from app.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = "products"
DISCOUNTS = "discounts"
ORDERS = "orders"
CONTACTS = "contacts"

_TS_KEY = "__timestamp__"

Snapshot = List[Dict[str, Any]]
OnChange = Callable[[Snapshot], None]


@dataclass(frozen=True)
class StoreTimestamp:
    value: datetime

    def to_date(self) -> datetime:
        return self.value

    def isoformat(self) -> str:
        return self.value.isoformat()


class _ServerTimestamp:
    def __repr__(self):
        return "SERVER_TIMESTAMP"


#wartosc pola zastepowana czasem zapisu
SERVER_TIMESTAMP = _ServerTimestamp()


def _encode(value: Any, now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        return {_TS_KEY: now.isoformat()}
    if isinstance(value, (datetime, StoreTimestamp)):
        return {_TS_KEY: to_date(value).isoformat()}
    if isinstance(value, dict):
        return {key: _encode(item, now) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(item, now) for item in value]
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_TS_KEY}:
            return StoreTimestamp(to_date(value[_TS_KEY]))
        return {key: _decode(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_decode(item) for item in value]
    return value


def _to_dict(document: DocumentModel) -> Dict[str, Any]:
    return {"id": document.doc_id, **_decode(document.data or {})}


class DocumentStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory
        self._subscribers: Dict[str, List[OnChange]] = {}
        self._lock = threading.Lock()
        #odczyt snapshotu i doreczenie po kolei, per kolekcja
        self._delivery_locks: Dict[str, Any] = {}

    def _delivery_lock(self, collection: str):
        with self._lock:
            return self._delivery_locks.setdefault(collection, threading.RLock())

    @contextmanager
    def _repo(self) -> Iterator[DocumentRepo]:
        db = self.session_factory()
        try:
            yield DocumentRepo(db)
        finally:
            db.close()

    # =====================================================
    # READ
    # =====================================================
    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._repo() as repo:
            document = repo.get_document(collection, doc_id)
            return _to_dict(document) if document else None

    def list_documents(self, collection: str) -> Snapshot:
        with self._repo() as repo:
            return [_to_dict(document) for document in repo.list_documents(collection)]

    # =====================================================
    # WRITE
    # =====================================================
    def _write(self, collection: str, action: str, apply: Callable[[DocumentRepo], None]) -> None:
        with self._repo() as repo:
            try:
                apply(repo)
                repo.commit()
            except SQLAlchemyError as e:
                repo.rollback()
                logger.error(f"Failed to {action} in {collection}: {e}")
                raise StoreWriteError(f"Failed to {action}. Please try again.", collection) from e

        self._publish(collection)

    def add_document(self, collection: str, fields: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        data = _encode({k: v for k, v in fields.items() if k != "id"}, now_utc())

        def apply(repo: DocumentRepo):
            repo.add_document(DocumentModel(collection=collection, doc_id=doc_id, data=data))

        self._write(collection, "save document", apply)
        logger.info(f"Added {collection}/{doc_id}")
        return doc_id

    def update_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        changes = _encode({k: v for k, v in fields.items() if k != "id"}, now_utc())

        def apply(repo: DocumentRepo):
            document = repo.get_document(collection, doc_id)
            if document is None:
                raise NotFoundError(f"{collection}/{doc_id} not found")
            repo.replace_data(document, {**(document.data or {}), **changes})

        self._write(collection, "update document", apply)
        logger.info(f"Updated {collection}/{doc_id}: {sorted(changes)}")

    def delete_document(self, collection: str, doc_id: str) -> None:
        deleted = []

        def apply(repo: DocumentRepo):
            document = repo.get_document(collection, doc_id)
            if document is not None:
                repo.delete_document(document)
                deleted.append(doc_id)

        self._write(collection, "delete document", apply)
        if deleted:
            logger.info(f"Deleted {collection}/{doc_id}")
        else:
            logger.info(f"Delete of missing {collection}/{doc_id} ignored")

    # =====================================================
    # SUBSCRIPTIONS
    # =====================================================
    def subscribe_to_collection(self, collection: str, on_change: OnChange) -> Callable[[], None]:
        with self._delivery_lock(collection):
            with self._lock:
                self._subscribers.setdefault(collection, []).append(on_change)

            logger.info(f"Subscribed to {collection}")
            self._deliver(collection, on_change, self.list_documents(collection))

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(collection, [])
                if on_change in callbacks:
                    callbacks.remove(on_change)
                    logger.info(f"Unsubscribed from {collection}")

        return unsubscribe

    def _publish(self, collection: str) -> None:
        """
        Snapshot czytany dopiero pod blokada kolekcji, wiec kazde doreczenie
        jest co najmniej tak swieze jak poprzednie.
        """
        with self._delivery_lock(collection):
            with self._lock:
                callbacks = list(self._subscribers.get(collection, ()))

            if not callbacks:
                return

            snapshot = self.list_documents(collection)
            for callback in callbacks:
                self._deliver(collection, callback, snapshot)

    def _deliver(self, collection: str, callback: OnChange, snapshot: Snapshot) -> None:
        try:
            callback(list(snapshot))
        except Exception:
            #blad subskrybenta nie cofa zapisu ani nie blokuje innych subskrybentow
            logger.exception(f"Subscriber of {collection} failed to apply snapshot")
