"""
Repository package.
Provides data access layer for all entities.
"""
from .contracts import DocumentStore, ClientStore, SequenceStore
from .base_repository import BaseRepository
from .document_repository import DocumentRepository
from .client_repository import ClientRepository
from .sequence_repository import SequenceRepository
from .memory import InMemoryDocumentStore, InMemoryClientStore, InMemorySequenceStore

__all__ = [
    "DocumentStore",
    "ClientStore",
    "SequenceStore",
    "BaseRepository",
    "DocumentRepository",
    "ClientRepository",
    "SequenceRepository",
    "InMemoryDocumentStore",
    "InMemoryClientStore",
    "InMemorySequenceStore",
]
