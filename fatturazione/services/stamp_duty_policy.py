"""
Imposta di bollo sulle fatture esenti IVA (regime forfettario).
"""
from decimal import Decimal

from fatturazione.config import Settings, settings as default_settings
from fatturazione.models import DocumentType
from fatturazione.utils.money import ZERO


class StampDutyPolicy:
    """Bollo fisso sui documenti forfettari oltre la soglia di legge."""

    def __init__(self, threshold: Decimal, amount: Decimal):
        self.threshold = threshold
        self.amount = amount

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "StampDutyPolicy":
        return cls(settings.STAMP_DUTY_THRESHOLD, settings.STAMP_DUTY_AMOUNT)

    def applies(self, document_type: DocumentType, taxable_total: Decimal, flat_rate: bool) -> bool:
        # Mai sulle note di credito; soglia strettamente superata
        if document_type == DocumentType.CREDIT_NOTE:
            return False
        return flat_rate and taxable_total > self.threshold

    def calculate(self, document_type: DocumentType, taxable_total: Decimal, flat_rate: bool) -> Decimal:
        if self.applies(document_type, taxable_total, flat_rate):
            return self.amount
        return ZERO
