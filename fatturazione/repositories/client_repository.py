"""
Client repository.
"""
from typing import Optional

from pymongo.errors import DuplicateKeyError

from .base_repository import BaseRepository
from fatturazione.exceptions import ConflictError
from fatturazione.models import Client


class ClientRepository(BaseRepository[Client]):
    """Repository for client lookups."""

    model = Client

    async def get(self, client_id: str) -> Optional[Client]:
        return await self.find_by_id(client_id)

    async def create(self, client: Client) -> Client:
        try:
            return await super().create(client)
        except DuplicateKeyError:
            raise ConflictError("cliente", f"cliente {client.id} già presente")
