"""
Document models (fattura, nota di credito, nota di debito).
Pydantic schemas for the fiscal computation engine.
"""
from datetime import date as date_type, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IvaRate(int, Enum):
    """Aliquote IVA ammesse."""
    STANDARD = 22
    REDUCED = 10
    INTERMEDIATE = 5
    SUPER_REDUCED = 4
    ZERO = 0


class NaturaIva(str, Enum):
    """
    Natura dell'operazione per righe ad aliquota 0% (FatturaPA, campo 2.2.1.14).
    """
    N1 = "N1"        # escluse ex art. 15
    N2_1 = "N2.1"    # non soggette, artt. da 7 a 7-septies
    N2_2 = "N2.2"    # non soggette, altri casi (regime forfettario)
    N3_1 = "N3.1"    # non imponibili: esportazioni
    N3_2 = "N3.2"    # cessioni intracomunitarie
    N3_3 = "N3.3"    # cessioni verso San Marino
    N3_4 = "N3.4"    # operazioni assimilate alle esportazioni
    N3_5 = "N3.5"    # a seguito di dichiarazioni d'intento
    N3_6 = "N3.6"    # altre operazioni non imponibili
    N4 = "N4"        # esenti
    N5 = "N5"        # regime del margine
    N6_1 = "N6.1"    # inversione contabile: rottami
    N6_2 = "N6.2"    # oro e argento
    N6_3 = "N6.3"    # subappalto nel settore edile
    N6_4 = "N6.4"    # cessione di fabbricati
    N6_5 = "N6.5"    # telefoni cellulari
    N6_6 = "N6.6"    # prodotti elettronici
    N6_7 = "N6.7"    # comparto edile e settori connessi
    N6_8 = "N6.8"    # settore energetico
    N6_9 = "N6.9"    # altri casi
    N7 = "N7"        # IVA assolta in altro stato UE

    @property
    def is_reverse_charge(self) -> bool:
        """Inversione contabile (art. 17 DPR 633/72)."""
        return self.value.startswith("N6")


class DocumentStatus(str, Enum):
    """Stati del ciclo di vita del documento."""
    DRAFT = "draft"
    ISSUED = "issued"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class DocumentType(str, Enum):
    """Tipo documento (Specifiche FatturaPA, campo 2.1.1.1)."""
    INVOICE = "TD01"
    CREDIT_NOTE = "TD04"
    DEBIT_NOTE = "TD05"

    @property
    def is_note(self) -> bool:
        return self in (DocumentType.CREDIT_NOTE, DocumentType.DEBIT_NOTE)


class VatExigibility(str, Enum):
    """Esigibilità IVA: immediata o scissione dei pagamenti."""
    IMMEDIATE = "I"
    SPLIT_PAYMENT = "S"


class LineItem(BaseModel):
    """Riga del documento. Le colonne derivate sono scritte solo dal calcolatore."""
    id: str = Field(default_factory=_new_id)
    description: str = Field(default="", description="Descrizione del bene o servizio")
    quantity: Decimal = Field(default=Decimal("1"), description="Quantità, deve essere > 0")
    unit_price: Decimal = Field(default=Decimal("0"), description="Prezzo unitario IVA esclusa")
    iva_rate: IvaRate = Field(default=IvaRate.STANDARD)
    natura_iva: Optional[NaturaIva] = Field(None, description="Obbligatoria solo con aliquota 0%")
    discount_percentage: Decimal = Field(default=Decimal("0"))
    discount_amount: Decimal = Field(default=Decimal("0"))

    taxable_base: Decimal = Field(default=Decimal("0.00"), description="Imponibile di riga")
    tax_amount: Decimal = Field(default=Decimal("0.00"), description="IVA di riga")
    total: Decimal = Field(default=Decimal("0.00"))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "description": "Consulenza fiscale",
                "quantity": "10",
                "unit_price": "100.00",
                "iva_rate": 22
            }
        }
    )

    @property
    def gross_amount(self) -> Decimal:
        """Quantity × unit price, before any discount."""
        return self.quantity * self.unit_price


class DocumentTotals(BaseModel):
    """Totali calcolati del documento."""
    taxable_total: Decimal = Decimal("0.00")
    tax_total: Decimal = Decimal("0.00")
    subtotal: Decimal = Decimal("0.00")
    withholding_amount: Decimal = Decimal("0.00")
    stamp_duty_amount: Decimal = Decimal("0.00")
    total_due: Decimal = Decimal("0.00")
    tax_by_rate: Dict[int, Decimal] = Field(default_factory=dict)
    vat_exigibility: VatExigibility = VatExigibility.IMMEDIATE
    split_payment_vat: Decimal = Decimal("0.00")
    amount_payable: Decimal = Decimal("0.00")


class Document(BaseModel):
    """Documento fiscale: fattura, nota di credito o nota di debito."""
    id: str = Field(default_factory=_new_id)
    number: Optional[str] = Field(None, description="Format: YYYY/NNN, set at issuance")
    number_ordinal: Optional[int] = None
    issue_date: Optional[date_type] = None
    due_date: Optional[date_type] = None
    client_id: str = ""
    status: DocumentStatus = DocumentStatus.DRAFT
    document_type: DocumentType = DocumentType.INVOICE
    items: List[LineItem] = Field(default_factory=list)

    document_discount_percentage: Decimal = Decimal("0")
    document_discount_amount: Decimal = Decimal("0")
    is_regime_forfettario: bool = False
    causale: Optional[str] = None
    notes: Optional[str] = None

    original_document_id: Optional[str] = None
    original_document_number: Optional[str] = None

    totals: DocumentTotals = Field(default_factory=DocumentTotals)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_draft(self) -> bool:
        return self.status == DocumentStatus.DRAFT


class DocumentInput(BaseModel):
    """Dati modificabili di una bozza (creazione e aggiornamento)."""
    client_id: str
    issue_date: date_type
    due_date: Optional[date_type] = None
    document_type: DocumentType = DocumentType.INVOICE
    items: List[LineItem] = Field(default_factory=list)
    document_discount_percentage: Decimal = Decimal("0")
    document_discount_amount: Decimal = Decimal("0")
    is_regime_forfettario: bool = False
    causale: Optional[str] = None
    notes: Optional[str] = None

    def to_document(self, **overrides) -> Document:
        return Document(**{**self.model_dump(), **overrides})


class NoteRequest(BaseModel):
    """Richiesta di nota di credito/debito."""
    reason: str = Field(..., min_length=1)
    items: Optional[List[LineItem]] = None


class TransitionRequest(BaseModel):
    status: DocumentStatus
    reason: Optional[str] = None
