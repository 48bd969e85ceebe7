"""
Client models.
The engine only reads clients; they are owned by an external registry.
"""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, Field


class ClientCategory(str, Enum):
    """Tipologia cliente."""
    PROFESSIONAL = "professional"
    COMPANY = "company"
    PUBLIC_ADMINISTRATION = "public_administration"


class Client(BaseModel):
    """Attributi fiscali del cliente usati nel calcolo dei totali."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(default="", description="Ragione sociale")
    vat_number: Optional[str] = Field(None, description="Partita IVA")
    tax_code: Optional[str] = Field(None, description="Codice Fiscale")
    category: ClientCategory = ClientCategory.COMPANY
    email: Optional[str] = None

    subject_to_withholding: bool = False
    withholding_percentage: Decimal = Decimal("20")
    # 100% per professionisti, 50% agenti senza dipendenti, 20% agenti con dipendenti
    withholding_base_percentage: Decimal = Decimal("100")
    subject_to_split_payment: bool = False
    is_regime_forfettario: bool = False

    office_code: Optional[str] = Field(None, description="Codice Univoco Ufficio (PA)")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
