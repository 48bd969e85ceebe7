"""
Client service.
Registers clients with validated fiscal attributes.
"""
import logging

from fatturazione.config import settings
from fatturazione.exceptions import InvalidInputError, NotFoundError
from fatturazione.models import ActorContext, Client
from fatturazione.repositories.contracts import ClientStore
from fatturazione.services.withholding_policy import WithholdingPolicy
from fatturazione.utils.logger import actor_logger
from fatturazione.validators import DocumentRules, normalizza_piva

logger = logging.getLogger(__name__)


class ClientService:
    """Service for client operations."""

    def __init__(self, client_store: ClientStore):
        self.client_store = client_store

    async def get_client(self, client_id: str) -> Client:
        client = await self.client_store.get(client_id)
        if client is None:
            raise NotFoundError("Cliente", client_id)
        return client

    async def create_client(self, client: Client, actor: ActorContext) -> Client:
        """
        Valida e registra un cliente.

        Se la percentuale di ritenuta non è indicata si usa quella standard
        della tipologia (20% per i professionisti).
        """
        log = actor_logger(logger, actor)

        updates = {}
        if client.vat_number:
            updates["vat_number"] = normalizza_piva(client.vat_number)
        if client.tax_code:
            updates["tax_code"] = client.tax_code.strip().upper()
        if client.subject_to_withholding and "withholding_percentage" not in client.model_fields_set:
            standard = WithholdingPolicy.standard_rate(client.category)
            updates["withholding_percentage"] = standard or settings.DEFAULT_WITHHOLDING_PERCENTAGE
        client = client.model_copy(update=updates)

        result = DocumentRules.validate_client(client)
        if not result.is_valid:
            raise InvalidInputError(result.errors)

        created = await self.client_store.create(client)
        log.info(f"Cliente registrato: {created.id} ({created.name})")
        return created
