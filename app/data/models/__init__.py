#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.document import DocumentModel

__all__ = ["DocumentModel"]
