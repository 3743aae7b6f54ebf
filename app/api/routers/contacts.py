# app/api/routers/contacts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store
from app.domain.errors import NotFoundError, StoreWriteError
from app.domain.schemas import Contact, ContactIn
from app.services.contact_service import ContactService
from app.services.document_store import DocumentStore

router = APIRouter(prefix="/contacts", tags=["contacts"])


def get_service(store: DocumentStore = Depends(get_store)):
    return ContactService(store)


@router.post("/", response_model=Contact, status_code=201)
def create_contact(payload: ContactIn, svc: ContactService = Depends(get_service)):
    try:
        return svc.create_contact(payload)
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/", response_model=List[Contact])
def list_contacts(svc: ContactService = Depends(get_service)):
    return svc.list_contacts()


@router.delete("/{contact_id}", status_code=204)
def delete_contact(contact_id: str, svc: ContactService = Depends(get_service)):
    try:
        svc.delete_contact(contact_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))
