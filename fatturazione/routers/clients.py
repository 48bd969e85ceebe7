"""
Clients router.
"""
from fastapi import APIRouter, Depends, Path, status

from fatturazione.models import ActorContext, Client
from fatturazione.services.client_service import ClientService
from fatturazione.utils.dependencies import get_actor, get_client_service

router = APIRouter()


@router.post("/", response_model=Client, status_code=status.HTTP_201_CREATED, summary="Register client")
async def create_client(
    client: Client,
    actor: ActorContext = Depends(get_actor),
    service: ClientService = Depends(get_client_service)
) -> Client:
    """
    Register a client after checking VAT number, tax code and PA office code.
    """
    return await service.create_client(client, actor)


@router.get("/{client_id}", response_model=Client, summary="Get client")
async def get_client(
    client_id: str = Path(..., description="Client ID"),
    service: ClientService = Depends(get_client_service)
) -> Client:
    return await service.get_client(client_id)
