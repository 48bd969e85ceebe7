"""
Fatturazione - Main Application Entry Point
FastAPI application over the fiscal computation and document lifecycle engine.

Command: uvicorn fatturazione.main:app --host 0.0.0.0 --port 8001
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI

from fatturazione.config import Settings, get_settings
from fatturazione.database import Database
from fatturazione.db_collections import COLL_CLIENTS, COLL_DOCUMENTS, COLL_SEQUENCES
from fatturazione.middleware.error_handler import add_exception_handlers
from fatturazione.repositories import (
    ClientRepository,
    DocumentRepository,
    InMemoryClientStore,
    InMemoryDocumentStore,
    InMemorySequenceStore,
    SequenceRepository
)
from fatturazione.routers import clients, documents
from fatturazione.services import (
    ClientService,
    DocumentAggregator,
    DocumentService,
    NoteDeriver,
    NumberingAllocator,
    StampDutyPolicy,
    WithholdingPolicy
)
from fatturazione.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def install_services(app: FastAPI, document_store, client_store, sequence_store, settings: Settings) -> None:
    """Wire stores, policies and services into app.state."""
    aggregator = DocumentAggregator(WithholdingPolicy(), StampDutyPolicy.from_settings(settings))
    allocator = NumberingAllocator(
        sequence_store,
        fallback_last_number=document_store.get_last_document_number
    )

    app.state.document_service = DocumentService(
        document_store,
        client_store,
        allocator,
        aggregator=aggregator,
        note_deriver=NoteDeriver(aggregator, due_days=settings.DEFAULT_DUE_DAYS)
    )
    app.state.client_service = ClientService(client_store)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    STORAGE_BACKEND=memory wires in-memory stores immediately;
    STORAGE_BACKEND=mongodb connects at startup.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT}, storage: {settings.STORAGE_BACKEND}")

        if settings.uses_mongodb:
            await Database.connect_db(settings)
            db = Database.get_db()
            install_services(
                app,
                DocumentRepository(db[COLL_DOCUMENTS]),
                ClientRepository(db[COLL_CLIENTS]),
                SequenceRepository(db[COLL_SEQUENCES]),
                settings
            )

        logger.info("✅ Application startup complete")

        yield

        logger.info("🔄 Shutting down application...")
        if settings.uses_mongodb:
            await Database.close_db()
        logger.info("✅ Application shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan
    )

    if not settings.uses_mongodb:
        install_services(
            app,
            InMemoryDocumentStore(),
            InMemoryClientStore(),
            InMemorySequenceStore(),
            settings
        )

    add_exception_handlers(app)

    app.include_router(documents.router, prefix="/api/documents", tags=["Documents"])
    app.include_router(clients.router, prefix="/api/clients", tags=["Clients"])

    @app.get("/api/health", tags=["Health"])
    async def health():
        return {"status": "ok", "app": settings.APP_NAME, "storage": settings.STORAGE_BACKEND}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fatturazione.main:app",
        host="0.0.0.0",
        port=8001,
        reload=get_settings().is_development,
        log_level=get_settings().LOG_LEVEL.lower()
    )
