"""
Contratti di persistenza richiesti dal motore.
Implementati da MongoDB (motor) e dagli archivi in memoria.
"""
from typing import List, Optional, Protocol

from fatturazione.models import Client, Document, DocumentStatus


class DocumentStore(Protocol):
    async def get(self, document_id: str) -> Optional[Document]: ...

    async def create(self, document: Document) -> Document: ...

    async def update(
        self,
        document: Document,
        expected_status: Optional[DocumentStatus] = None
    ) -> Optional[Document]:
        """None se il documento non esiste o lo stato salvato non è `expected_status`."""
        ...

    async def delete(self, document_id: str) -> bool: ...

    async def get_last_document_number(self) -> Optional[str]: ...

    async def find_by_original(self, original_document_id: str) -> List[Document]: ...


class ClientStore(Protocol):
    async def get(self, client_id: str) -> Optional[Client]: ...

    async def create(self, client: Client) -> Client: ...


class SequenceStore(Protocol):
    async def get_last_number(self) -> Optional[str]: ...

    async def compare_and_swap(self, expected: Optional[str], new: str) -> bool:
        """Scrive `new` solo se l'ultimo numero salvato è ancora `expected`."""
        ...
