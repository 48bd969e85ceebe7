"""
FastAPI dependencies for dependency injection.
Authentication is external: the gateway forwards the caller identity in
X-User-Id / X-User-Name, used only for audit logging.
"""
from typing import Optional

from fastapi import Header, Request

from fatturazione.models import ActorContext
from fatturazione.services.client_service import ClientService
from fatturazione.services.document_service import DocumentService


async def get_actor(
    x_user_id: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None)
) -> ActorContext:
    """
    Usage:
        @router.post("/")
        async def create(actor: ActorContext = Depends(get_actor)):
            ...
    """
    if not x_user_id:
        return ActorContext.system()
    return ActorContext(user_id=x_user_id, user_name=x_user_name or x_user_id)


async def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


async def get_client_service(request: Request) -> ClientService:
    return request.app.state.client_service
