# app/services/contact_service.py
from datetime import datetime, timezone
from typing import List

from pydantic import ValidationError

from app.domain.errors import NotFoundError
from app.domain.schemas import Contact, ContactIn
from app.services.document_store import CONTACTS, SERVER_TIMESTAMP, DocumentStore
from app.utils.logging import get_logger

logger = get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class ContactService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def create_contact(self, payload: ContactIn) -> Contact:
        fields = payload.model_dump(by_alias=True)
        fields["timestamp"] = SERVER_TIMESTAMP

        contact_id = self.store.add_document(CONTACTS, fields)
        logger.info(f"Contact message {contact_id} received from {payload.email}")
        return Contact.model_validate(self.store.get_document(CONTACTS, contact_id))

    def list_contacts(self) -> List[Contact]:
        """Wiadomosci od najnowszej."""
        contacts = []
        for doc in self.store.list_documents(CONTACTS):
            try:
                contacts.append(Contact.model_validate(doc))
            except ValidationError as e:
                logger.warning(f"Skipping malformed contact {doc.get('id')!r}: {e}")

        return sorted(contacts, key=lambda c: c.timestamp or _OLDEST, reverse=True)

    def delete_contact(self, contact_id: str) -> None:
        if self.store.get_document(CONTACTS, contact_id) is None:
            raise NotFoundError(f"Contact {contact_id} not found")

        self.store.delete_document(CONTACTS, contact_id)
        logger.info(f"Contact {contact_id} deleted")
