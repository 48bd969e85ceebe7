"""
Document service.
Handles the draft → issued → sent/paid/overdue/cancelled workflow.

Ogni operazione segue lo schema: carica → valida → esegue.
Le eccezioni (NotFound, InvalidInput, ForbiddenOperation, Conflict) arrivano
al chiamante senza modifiche e senza retry.
"""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Optional
import logging

from fatturazione.config import settings
from fatturazione.exceptions import (
    ConflictError,
    ForbiddenOperationError,
    InvalidInputError,
    NotFoundError
)
from fatturazione.models import (
    ActorContext,
    Client,
    Document,
    DocumentInput,
    DocumentStatus,
    DocumentType,
    LineItem
)
from fatturazione.repositories.contracts import ClientStore, DocumentStore
from fatturazione.services import lifecycle
from fatturazione.services.credit_note_service import NoteDeriver
from fatturazione.services.document_aggregator import DocumentAggregator
from fatturazione.services.numbering import NumberingAllocator, ordinal_of
from fatturazione.utils.logger import actor_logger
from fatturazione.utils.money import ZERO
from fatturazione.validators import DocumentRules, ValidationResult

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentService:
    """Service for document lifecycle operations."""

    def __init__(
        self,
        document_store: DocumentStore,
        client_store: ClientStore,
        allocator: NumberingAllocator,
        aggregator: Optional[DocumentAggregator] = None,
        note_deriver: Optional[NoteDeriver] = None,
        today: Optional[Callable[[], date]] = None
    ):
        """
        Initialize document service.

        Args:
            document_store: Archivio documenti
            client_store: Anagrafica clienti (sola lettura per il calcolo)
            allocator: Allocatore della numerazione progressiva
            aggregator: Calcolo totali
            note_deriver: Costruzione note di credito/debito
            today: Sorgente della data corrente (per i test)
        """
        self.document_store = document_store
        self.client_store = client_store
        self.allocator = allocator
        self.aggregator = aggregator or DocumentAggregator()
        self.note_deriver = note_deriver or NoteDeriver(self.aggregator)
        self.today = today or date.today

    # ------------------------------------------------------------------
    # Load helpers
    # ------------------------------------------------------------------

    async def get_document(self, document_id: str) -> Document:
        document = await self.document_store.get(document_id)
        if document is None:
            raise NotFoundError("Documento", document_id)
        return document

    async def _get_client(self, client_id: str) -> Client:
        client = await self.client_store.get(client_id) if client_id else None
        if client is None:
            raise InvalidInputError(f"Cliente non trovato: {client_id}")
        return client

    def _ensure_valid(self, document: Document) -> None:
        result = DocumentRules.validate_document(document, today=self.today())
        if not result.is_valid:
            raise InvalidInputError(result.errors)

    def _with_default_due_date(self, document: Document) -> Document:
        if document.due_date is None and document.issue_date is not None:
            return document.model_copy(update={
                "due_date": document.issue_date + timedelta(days=settings.DEFAULT_DUE_DAYS)
            })
        return document

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    async def create_document(self, data: DocumentInput, actor: ActorContext) -> Document:
        """
        Crea una bozza di fattura.

        Raises:
            InvalidInputError: cliente inesistente o dati non validi
        """
        log = actor_logger(logger, actor)

        if data.document_type != DocumentType.INVOICE:
            raise InvalidInputError(
                "Le note di credito e di debito si creano a partire dal documento originale"
            )

        client = await self._get_client(data.client_id)
        document = self._with_default_due_date(data.to_document())
        self._ensure_valid(document)

        document = self.aggregator.compute(document, client)
        created = await self.document_store.create(document)

        log.info(f"Bozza creata: {created.id} (totale {created.totals.total_due})", extra={"document_id": created.id})
        return created

    async def update_document(self, document_id: str, data: DocumentInput, actor: ActorContext) -> Document:
        """
        Aggiorna una bozza; i documenti emessi non sono modificabili.

        Raises:
            NotFoundError, ForbiddenOperationError, InvalidInputError
        """
        log = actor_logger(logger, actor)
        existing = await self.get_document(document_id)
        lifecycle.ensure_editable(existing, "modifica")

        if data.document_type != existing.document_type:
            raise InvalidInputError("Il tipo documento non è modificabile")

        client = await self._get_client(data.client_id)
        document = self._with_default_due_date(data.to_document(
            id=existing.id,
            status=existing.status,
            original_document_id=existing.original_document_id,
            original_document_number=existing.original_document_number,
            created_at=existing.created_at,
            updated_at=_utcnow()
        ))
        self._ensure_valid(document)

        document = self.aggregator.compute(document, client)
        updated = await self.document_store.update(document, expected_status=DocumentStatus.DRAFT)
        if updated is None:
            raise ConflictError("documento", "il documento è stato modificato da un'altra operazione")

        log.info(f"Bozza aggiornata: {document_id}", extra={"document_id": document_id})
        return updated

    async def recalculate_document(self, document_id: str, actor: ActorContext) -> Document:
        """Ricalcola i totali di una bozza (ad esempio dopo modifiche al cliente)."""
        log = actor_logger(logger, actor)
        existing = await self.get_document(document_id)
        lifecycle.ensure_editable(existing, "ricalcolo")

        client = await self._get_client(existing.client_id)
        document = self.aggregator.compute(existing, client).model_copy(update={"updated_at": _utcnow()})

        updated = await self.document_store.update(document, expected_status=DocumentStatus.DRAFT)
        if updated is None:
            raise ConflictError("documento", "il documento è stato modificato da un'altra operazione")

        log.info(f"Totali ricalcolati: {document_id}", extra={"document_id": document_id})
        return updated

    async def delete_document(self, document_id: str, actor: ActorContext) -> bool:
        """
        Elimina una bozza.
        I documenti emessi non si eliminano: si annullano con nota di credito.
        """
        log = actor_logger(logger, actor)
        existing = await self.get_document(document_id)
        lifecycle.ensure_editable(existing, "eliminazione")

        deleted = await self.document_store.delete(document_id)
        log.info(f"Bozza eliminata: {document_id}", extra={"document_id": document_id})
        return deleted

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def issue_document(self, document_id: str, actor: ActorContext) -> Document:
        """
        Emette una bozza: ricalcolo finale, numerazione, stato issued.

        Raises:
            ForbiddenOperationError: documento non in bozza (anche una seconda emissione)
            InvalidInputError: dati non validi
            ConflictError: numerazione contesa o documento modificato nel frattempo
        """
        log = actor_logger(logger, actor)
        document = await self.get_document(document_id)
        lifecycle.ensure_transition(document.status, DocumentStatus.ISSUED, "emissione")

        client = await self._get_client(document.client_id)
        self._ensure_valid(document)

        if document.document_type.is_note:
            await self._ensure_valid_note(document, exclude_id=document.id)

        computed = self.aggregator.compute(document, client)

        async def persist(number: str) -> Document:
            issued = computed.model_copy(update={
                "number": number,
                "number_ordinal": ordinal_of(number),
                "status": DocumentStatus.ISSUED,
                "updated_at": _utcnow()
            })
            saved = await self.document_store.update(issued, expected_status=DocumentStatus.DRAFT)
            if saved is None:
                # Il contatore non avanza: il numero resta disponibile
                log.warning(f"Emissione di {document_id} annullata: documento non più in bozza")
                raise ConflictError(
                    "documento",
                    "il documento non è più in bozza",
                    details={"document_id": document_id, "number": number}
                )
            return saved

        saved = await self.allocator.allocate_and_persist(persist)
        number = saved.number

        log.info(
            f"✅ Documento emesso: {number} (totale {saved.totals.total_due})",
            extra={"document_id": document_id, "document_number": number, "operation": "issue"}
        )
        return saved

    async def transition_document(
        self,
        document_id: str,
        new_status: DocumentStatus,
        actor: ActorContext,
        reason: Optional[str] = None
    ) -> Document:
        """
        Cambia lo stato del documento.

        L'emissione passa da issue_document. L'annullamento di una fattura
        emessa richiede una nota di credito: se non esiste viene creata per
        l'intero importo. Le note di credito e di debito si annullano senza
        contro-documento.
        """
        if new_status == DocumentStatus.ISSUED:
            return await self.issue_document(document_id, actor)

        log = actor_logger(logger, actor)
        document = await self.get_document(document_id)
        lifecycle.ensure_transition(document.status, new_status, "cambio stato")

        storno: Optional[Document] = None
        if (
            new_status == DocumentStatus.CANCELLED
            and lifecycle.is_finalized(document.status)
            and not document.document_type.is_note
            and not await self._active_credit_notes(document.id)
        ):
            storno = await self.create_credit_note(
                document.id,
                reason or f"Storno per annullamento documento {document.number}",
                actor
            )

        changed = document.model_copy(update={"status": new_status, "updated_at": _utcnow()})
        saved = await self.document_store.update(changed, expected_status=document.status)
        if saved is None:
            if storno is not None:
                await self.document_store.delete(storno.id)
                log.warning(f"Nota di credito {storno.id} rimossa: annullamento di {document.number} non riuscito")
            raise ConflictError("documento", "lo stato è stato modificato da un'altra operazione")

        if storno is not None:
            log.warning(
                f"Annullamento di {document.number}: creata nota di credito {storno.id} da emettere",
                extra={"document_id": document.id}
            )
        log.info(
            f"Documento {document.number or document.id}: {document.status.value} → {new_status.value}",
            extra={"document_id": document.id, "operation": "transition"}
        )
        return saved

    # ------------------------------------------------------------------
    # Credit / debit notes
    # ------------------------------------------------------------------

    async def _active_credit_notes(self, original_id: str, exclude_id: Optional[str] = None) -> List[Document]:
        linked = await self.document_store.find_by_original(original_id)
        return [
            d for d in linked
            if d.document_type == DocumentType.CREDIT_NOTE
            and d.status != DocumentStatus.CANCELLED
            and d.id != exclude_id
        ]

    async def _already_credited(self, original_id: str, exclude_id: Optional[str] = None) -> Decimal:
        notes = await self._active_credit_notes(original_id, exclude_id)
        return sum((abs(n.totals.total_due) for n in notes), ZERO)

    async def _ensure_valid_note(self, note: Document, exclude_id: Optional[str] = None) -> None:
        original = await self.document_store.get(note.original_document_id) if note.original_document_id else None
        if original is None:
            raise NotFoundError("Documento originale", note.original_document_id)

        already = ZERO
        if note.document_type == DocumentType.CREDIT_NOTE:
            already = await self._already_credited(original.id, exclude_id)

        result: ValidationResult = self.note_deriver.validate_note(note, original, already)
        if not result.is_valid:
            raise InvalidInputError(result.errors, details={"original_document_id": original.id})

    async def create_credit_note(
        self,
        document_id: str,
        reason: str,
        actor: ActorContext,
        items: Optional[List[LineItem]] = None
    ) -> Document:
        """
        Crea una nota di credito in bozza collegata al documento.

        Raises:
            NotFoundError: documento originale inesistente
            InvalidInputError: tutte le regole violate (originale in bozza, importo eccedente, ...)
        """
        log = actor_logger(logger, actor)
        original = await self.get_document(document_id)
        client = await self._get_client(original.client_id)

        note = self.note_deriver.create_credit_note(
            original, reason, items=items, client=client, today=self.today()
        )
        await self._ensure_valid_note(note)
        self._ensure_valid(note)

        created = await self.document_store.create(note)
        log.info(
            f"Nota di credito {created.id} su {original.number} (totale {created.totals.total_due})",
            extra={"document_id": created.id, "operation": "credit_note"}
        )
        return created

    async def create_debit_note(
        self,
        document_id: str,
        items: List[LineItem],
        reason: str,
        actor: ActorContext
    ) -> Document:
        """Crea una nota di debito in bozza con addebiti aggiuntivi."""
        log = actor_logger(logger, actor)
        original = await self.get_document(document_id)
        client = await self._get_client(original.client_id)

        note = self.note_deriver.create_debit_note(
            original, items, reason, client=client, today=self.today()
        )
        await self._ensure_valid_note(note)
        self._ensure_valid(note)

        created = await self.document_store.create(note)
        log.info(
            f"Nota di debito {created.id} su {original.number} (totale {created.totals.total_due})",
            extra={"document_id": created.id, "operation": "debit_note"}
        )
        return created
