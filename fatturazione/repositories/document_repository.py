"""
Document repository (fatture, note di credito e di debito).
"""
from typing import Optional, List
import logging

from pymongo.errors import DuplicateKeyError

from .base_repository import BaseRepository
from fatturazione.exceptions import ConflictError
from fatturazione.models import Document, DocumentStatus

logger = logging.getLogger(__name__)


class DocumentRepository(BaseRepository[Document]):
    """Repository for document operations."""

    model = Document

    async def get(self, document_id: str) -> Optional[Document]:
        return await self.find_by_id(document_id)

    async def create(self, document: Document) -> Document:
        try:
            return await super().create(document)
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate document key: {e}")
            raise ConflictError("documento", "identificativo o numero già presente", details={"id": document.id})

    async def update(
        self,
        document: Document,
        expected_status: Optional[DocumentStatus] = None
    ) -> Optional[Document]:
        """
        Sostituisce il documento salvato.

        Con `expected_status` la scrittura avviene solo se lo stato salvato
        coincide (ad esempio ancora in bozza al momento dell'emissione).
        """
        extra_filter = {"status": expected_status.value} if expected_status else None
        try:
            replaced = await self.replace(document, extra_filter)
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate document number {document.number}: {e}")
            raise ConflictError("documento", f"numero {document.number} già assegnato")
        return document if replaced else None

    async def get_last_document_number(self) -> Optional[str]:
        """Ultimo numero assegnato, ordinato per progressivo numerico."""
        last = await self.find_one(
            {"number": {"$ne": None}},
            sort=[("number_ordinal", -1)]
        )
        return last.number if last else None

    async def find_by_original(self, original_document_id: str) -> List[Document]:
        return await self.find_all(
            filter_query={"original_document_id": original_document_id},
            limit=1000,
            sort=[("created_at", 1)]
        )
