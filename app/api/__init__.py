# app/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routers import carts, contacts, discounts, health, orders, products
from app.data.database import SessionLocal
from app.services.document_store import DocumentStore
from app.services.live_catalog import LiveCatalog


def create_app(store: DocumentStore | None = None) -> FastAPI:
    store = store or DocumentStore(SessionLocal)
    catalog = LiveCatalog(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        catalog.start()
        yield
        catalog.stop()

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.catalog = catalog

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(discounts.router)
    app.include_router(orders.router)
    app.include_router(contacts.router)

    return app
