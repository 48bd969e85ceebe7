"""
In-memory stores.
Used by the `memory` storage backend and by the test suite.
Every call yields to the event loop so concurrent callers interleave as they
would against a real database.
"""
from typing import Dict, List, Optional
import asyncio

from fatturazione.exceptions import ConflictError
from fatturazione.models import Client, Document, DocumentStatus


class InMemoryDocumentStore:

    def __init__(self):
        self._documents: Dict[str, Document] = {}

    async def get(self, document_id: str) -> Optional[Document]:
        await asyncio.sleep(0)
        document = self._documents.get(document_id)
        return document.model_copy(deep=True) if document else None

    async def create(self, document: Document) -> Document:
        await asyncio.sleep(0)
        if document.id in self._documents:
            raise ConflictError("documento", f"documento {document.id} già presente")
        self._check_number_unique(document)
        self._documents[document.id] = document.model_copy(deep=True)
        return document

    async def update(
        self,
        document: Document,
        expected_status: Optional[DocumentStatus] = None
    ) -> Optional[Document]:
        await asyncio.sleep(0)
        stored = self._documents.get(document.id)
        if stored is None:
            return None
        if expected_status is not None and stored.status != expected_status:
            return None
        self._check_number_unique(document)
        self._documents[document.id] = document.model_copy(deep=True)
        return document

    async def delete(self, document_id: str) -> bool:
        await asyncio.sleep(0)
        return self._documents.pop(document_id, None) is not None

    async def get_last_document_number(self) -> Optional[str]:
        await asyncio.sleep(0)
        numbered = [d for d in self._documents.values() if d.number]
        if not numbered:
            return None
        return max(numbered, key=lambda d: d.number_ordinal or 0).number

    async def find_by_original(self, original_document_id: str) -> List[Document]:
        await asyncio.sleep(0)
        return [
            d.model_copy(deep=True)
            for d in sorted(self._documents.values(), key=lambda d: d.created_at)
            if d.original_document_id == original_document_id
        ]

    def _check_number_unique(self, document: Document) -> None:
        if not document.number:
            return
        for other in self._documents.values():
            if other.id != document.id and other.number == document.number:
                raise ConflictError("documento", f"numero {document.number} già assegnato")


class InMemoryClientStore:

    def __init__(self, clients: Optional[List[Client]] = None):
        self._clients: Dict[str, Client] = {c.id: c for c in clients or []}

    async def get(self, client_id: str) -> Optional[Client]:
        await asyncio.sleep(0)
        return self._clients.get(client_id)

    async def create(self, client: Client) -> Client:
        await asyncio.sleep(0)
        if client.id in self._clients:
            raise ConflictError("cliente", f"cliente {client.id} già presente")
        self._clients[client.id] = client
        return client


class InMemorySequenceStore:
    """Contatore in memoria con compare-and-swap."""

    def __init__(self, last_number: Optional[str] = None):
        self._last_number = last_number

    async def get_last_number(self) -> Optional[str]:
        await asyncio.sleep(0)
        return self._last_number

    async def compare_and_swap(self, expected: Optional[str], new: str) -> bool:
        await asyncio.sleep(0)
        # Nessun await tra confronto e scrittura: atomico sul loop
        if self._last_number != expected:
            return False
        self._last_number = new
        return True
