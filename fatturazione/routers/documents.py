"""
Documents router.
API endpoints for invoices, credit notes and debit notes.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel, Field

from fatturazione.models import (
    ActorContext,
    Document,
    DocumentInput,
    LineItem,
    NoteRequest,
    TransitionRequest
)
from fatturazione.services.document_service import DocumentService
from fatturazione.utils.dependencies import get_actor, get_document_service

router = APIRouter()


class DebitNoteRequest(BaseModel):
    reason: str = Field(..., min_length=1)
    items: List[LineItem] = Field(..., min_length=1)


@router.post(
    "/",
    response_model=Document,
    status_code=status.HTTP_201_CREATED,
    summary="Create draft invoice"
)
async def create_document(
    data: DocumentInput,
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    """
    Create a draft invoice; totals are computed immediately.

    **Errors:**
    - 400 if the client does not exist or any rule is violated (all listed in details.errors)
    """
    return await service.create_document(data, actor)


@router.get("/{document_id}", response_model=Document, summary="Get document")
async def get_document(
    document_id: str = Path(..., description="Document ID"),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    return await service.get_document(document_id)


@router.put("/{document_id}", response_model=Document, summary="Update draft")
async def update_document(
    data: DocumentInput,
    document_id: str = Path(..., description="Document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    """Only drafts can be updated (403 otherwise)."""
    return await service.update_document(document_id, data, actor)


@router.post("/{document_id}/recalculate", response_model=Document, summary="Recompute draft totals")
async def recalculate_document(
    document_id: str = Path(..., description="Document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    return await service.recalculate_document(document_id, actor)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete draft")
async def delete_document(
    document_id: str = Path(..., description="Document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> None:
    await service.delete_document(document_id, actor)


@router.post("/{document_id}/issue", response_model=Document, summary="Issue document")
async def issue_document(
    document_id: str = Path(..., description="Document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    """
    Assign the next progressive number and move the draft to `issued`.

    **Errors:**
    - 403 if the document is not a draft
    - 409 on a numbering conflict
    """
    return await service.issue_document(document_id, actor)


@router.post("/{document_id}/transition", response_model=Document, summary="Change status")
async def transition_document(
    request: TransitionRequest,
    document_id: str = Path(..., description="Document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    return await service.transition_document(document_id, request.status, actor, reason=request.reason)


@router.post(
    "/{document_id}/credit-notes",
    response_model=Document,
    status_code=status.HTTP_201_CREATED,
    summary="Create credit note"
)
async def create_credit_note(
    request: NoteRequest,
    document_id: str = Path(..., description="Original document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    """Full credit note, or partial when `items` is given."""
    return await service.create_credit_note(document_id, request.reason, actor, items=request.items)


@router.post(
    "/{document_id}/debit-notes",
    response_model=Document,
    status_code=status.HTTP_201_CREATED,
    summary="Create debit note"
)
async def create_debit_note(
    request: DebitNoteRequest,
    document_id: str = Path(..., description="Original document ID"),
    actor: ActorContext = Depends(get_actor),
    service: DocumentService = Depends(get_document_service)
) -> Document:
    return await service.create_debit_note(document_id, request.items, request.reason, actor)
