# app/api/deps.py
import redis
from fastapi import Depends, Query, Request

from app.services.cart_service import CartStore
from app.services.document_store import DocumentStore
from app.services.live_catalog import LiveCatalog
from app.services.storage import persistent_scope, redis_client, session_scope


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_catalog(request: Request) -> LiveCatalog:
    return request.app.state.catalog


def get_redis() -> redis.Redis:
    return redis_client()


def get_cart_store(
    shopper_id: str = Query(..., min_length=1, description="Trwaly identyfikator przegladarki"),
    session_id: str = Query(..., min_length=1, description="Identyfikator sesji"),
    client: redis.Redis = Depends(get_redis),
) -> CartStore:
    return CartStore(
        persistent=persistent_scope(client, shopper_id),
        session=session_scope(client, session_id),
    )
