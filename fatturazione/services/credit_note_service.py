"""
Note di credito (TD04) e note di debito (TD05).

NOTA DI CREDITO:
- copia le righe del documento originale con importi negati
  (prezzo unitario e sconto fisso negativi, quantità invariata)
- oppure, se indicate, solo le righe passate (nota parziale)
- non può stornare più di quanto fatturato

NOTA DI DEBITO:
- nessuna riga copiata, solo gli addebiti aggiuntivi indicati

Entrambe nascono in bozza e sono collegate all'originale (id + numero).
"""
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
import logging
import uuid

from fatturazione.config import settings
from fatturazione.models import (
    Client,
    Document,
    DocumentStatus,
    DocumentType,
    DocumentTotals,
    LineItem
)
from fatturazione.services.document_aggregator import DocumentAggregator
from fatturazione.utils.money import ZERO
from fatturazione.validators import ValidationResult

logger = logging.getLogger(__name__)


def _negated_item(item: LineItem) -> LineItem:
    return LineItem(
        id=str(uuid.uuid4()),
        description=item.description,
        quantity=item.quantity,
        unit_price=-abs(item.unit_price),
        iva_rate=item.iva_rate,
        natura_iva=item.natura_iva,
        discount_percentage=item.discount_percentage,
        discount_amount=-abs(item.discount_amount)
    )


def _fresh_item(item: LineItem) -> LineItem:
    return item.model_copy(update={
        "id": str(uuid.uuid4()),
        "taxable_base": ZERO,
        "tax_amount": ZERO,
        "total": ZERO
    })


class NoteDeriver:
    """Costruisce e valida note di credito e di debito."""

    def __init__(
        self,
        aggregator: Optional[DocumentAggregator] = None,
        due_days: int = settings.DEFAULT_DUE_DAYS
    ):
        self.aggregator = aggregator or DocumentAggregator()
        self.due_days = due_days

    def _base_note(
        self,
        original: Document,
        document_type: DocumentType,
        items: List[LineItem],
        reason: str,
        today: Optional[date]
    ) -> Document:
        issue_date = today or date.today()
        causale = reason
        # La causale forfettaria deve continuare a citare la norma
        if original.is_regime_forfettario and original.causale:
            causale = f"{reason} - {original.causale}"

        return Document(
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=self.due_days),
            client_id=original.client_id,
            status=DocumentStatus.DRAFT,
            document_type=document_type,
            items=items,
            is_regime_forfettario=original.is_regime_forfettario,
            causale=causale,
            notes=reason,
            original_document_id=original.id,
            original_document_number=original.number,
            totals=DocumentTotals()
        )

    def create_credit_note(
        self,
        original: Document,
        reason: str,
        items: Optional[List[LineItem]] = None,
        client: Optional[Client] = None,
        today: Optional[date] = None
    ) -> Document:
        """
        Crea una nota di credito in bozza.

        Args:
            original: Documento emesso da stornare
            reason: Motivo dello storno (diventa causale e note)
            items: Righe da stornare; None per lo storno totale
            client: Se indicato, i totali della nota vengono calcolati
            today: Data della nota

        Returns:
            Nota di credito non ancora validata né salvata
        """
        source_items = items if items is not None else original.items
        note = self._base_note(
            original,
            DocumentType.CREDIT_NOTE,
            [_negated_item(item) for item in source_items],
            reason,
            today
        )

        # Storno totale: anche lo sconto di documento viene riportato
        if items is None:
            note.document_discount_percentage = original.document_discount_percentage
            note.document_discount_amount = -abs(original.document_discount_amount)

        logger.info(f"Nota di credito creata per documento {original.number or original.id}")
        return self.aggregator.compute(note, client) if client else note

    def create_debit_note(
        self,
        original: Document,
        items: List[LineItem],
        reason: str,
        client: Optional[Client] = None,
        today: Optional[date] = None
    ) -> Document:
        """Crea una nota di debito in bozza con i soli addebiti aggiuntivi."""
        note = self._base_note(
            original,
            DocumentType.DEBIT_NOTE,
            [_fresh_item(item) for item in items],
            reason,
            today
        )
        logger.info(f"Nota di debito creata per documento {original.number or original.id}")
        return self.aggregator.compute(note, client) if client else note

    @staticmethod
    def validate_note(
        note: Document,
        original: Optional[Document],
        already_credited: Decimal = ZERO
    ) -> ValidationResult:
        """
        Valida una nota rispetto al documento originale.

        Args:
            note: Nota con totali già calcolati
            original: Documento originale, None se non trovato
            already_credited: Totale assoluto delle altre note di credito
                già collegate all'originale

        Returns:
            ValidationResult con tutte le regole violate
        """
        errors: List[str] = []

        if not note.document_type.is_note:
            errors.append("Il tipo documento deve essere nota di credito (TD04) o nota di debito (TD05)")
        if not note.original_document_id:
            errors.append("Il riferimento al documento originale è obbligatorio")
        if not note.original_document_number:
            errors.append("Il numero del documento originale è obbligatorio")
        if not note.items:
            errors.append("La nota deve contenere almeno una riga")

        if original is None:
            errors.append("Documento originale non trovato")
            return ValidationResult.failure(errors)

        if note.original_document_id and note.original_document_id != original.id:
            errors.append("La nota non è collegata al documento originale indicato")
        if original.status == DocumentStatus.DRAFT:
            errors.append(
                "Il documento originale è in bozza: modificare direttamente la bozza invece di emettere una nota"
            )
        elif original.status == DocumentStatus.CANCELLED and note.document_type == DocumentType.DEBIT_NOTE:
            # Lo storno di un documento annullato resta ammesso
            errors.append("Non si emettono note di debito su un documento annullato")
        if original.document_type.is_note:
            errors.append("Una nota può riferirsi solo a una fattura")

        if note.document_type == DocumentType.CREDIT_NOTE:
            note_totals, original_totals = note.totals, original.totals

            credited = abs(note_totals.total_due) + already_credited
            if credited > abs(original_totals.total_due):
                errors.append(
                    f"L'importo stornato ({credited}) supera il totale del documento originale "
                    f"({abs(original_totals.total_due)})"
                )
            if abs(note_totals.taxable_total) > abs(original_totals.taxable_total):
                errors.append(
                    f"L'imponibile della nota ({abs(note_totals.taxable_total)}) supera quello del "
                    f"documento originale ({abs(original_totals.taxable_total)})"
                )
            if abs(note_totals.tax_total) > abs(original_totals.tax_total):
                errors.append(
                    f"L'IVA della nota ({abs(note_totals.tax_total)}) supera quella del "
                    f"documento originale ({abs(original_totals.tax_total)})"
                )

        return ValidationResult.from_errors(errors)
