"""
Models package.
Pydantic schemas for all entities.
"""
from .document import (
    IvaRate,
    NaturaIva,
    DocumentStatus,
    DocumentType,
    VatExigibility,
    LineItem,
    DocumentTotals,
    Document,
    DocumentInput,
    NoteRequest,
    TransitionRequest
)

from .client import Client, ClientCategory

from .actor import ActorContext

__all__ = [
    "IvaRate",
    "NaturaIva",
    "DocumentStatus",
    "DocumentType",
    "VatExigibility",
    "LineItem",
    "DocumentTotals",
    "Document",
    "DocumentInput",
    "NoteRequest",
    "TransitionRequest",
    "Client",
    "ClientCategory",
    "ActorContext"
]
