# app/repos/document_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.document import DocumentModel


class DocumentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_document(self, collection: str, doc_id: str) -> DocumentModel | None:
        return self.db.execute(
            select(DocumentModel).where(
                DocumentModel.collection == collection,
                DocumentModel.doc_id == doc_id,
            )
        ).scalar_one_or_none()

    def list_documents(self, collection: str) -> List[DocumentModel]:
        return list(
            self.db.execute(
                select(DocumentModel)
                .where(DocumentModel.collection == collection)
                .order_by(DocumentModel.seq)
            ).scalars().all()
        )

    def add_document(self, document: DocumentModel) -> DocumentModel:
        self.db.add(document)
        self.db.flush()
        return document

    def replace_data(self, document: DocumentModel, data: dict) -> DocumentModel:
        #nowy dict, zeby SQLAlchemy zauwazyl zmiane kolumny JSON
        document.data = dict(data)
        self.db.add(document)
        self.db.flush()
        return document

    def delete_document(self, document: DocumentModel) -> None:
        self.db.delete(document)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
