"""
Ritenuta d'acconto.

La ritenuta si calcola SEMPRE sull'imponibile (totale imponibile del
documento), mai sul totale comprensivo di IVA.

Esempio: imponibile 1000, IVA 22% = 220, ritenuta 20% = 200 (su 1000),
netto a pagare = 1000 + 220 - 200 = 1020.
"""
from decimal import Decimal
import logging

from fatturazione.models import Client, ClientCategory
from fatturazione.utils.money import ZERO, HUNDRED, round2

logger = logging.getLogger(__name__)

# Art. 25 DPR 600/73: 20% sui compensi dei professionisti
PROFESSIONAL_RATE = Decimal("20")


class WithholdingPolicy:
    """Decide se la ritenuta si applica e ne calcola l'importo."""

    def applies(self, client: Client, flat_rate: bool) -> bool:
        """
        Ritenuta e split payment sono alternativi; il regime forfettario
        esclude la ritenuta.
        """
        if flat_rate:
            return False
        if client.subject_to_split_payment:
            return False
        return client.subject_to_withholding

    def calculate(
        self,
        taxable_total: Decimal,
        percentage: Decimal,
        base_percentage: Decimal = HUNDRED
    ) -> Decimal:
        """Ritenuta = imponibile × base% × aliquota%, arrotondata al centesimo."""
        withholding_base = taxable_total * base_percentage / HUNDRED
        return round2(withholding_base * percentage / HUNDRED)

    def amount_for(self, client: Client, taxable_total: Decimal, flat_rate: bool) -> Decimal:
        if not self.applies(client, flat_rate):
            return ZERO
        return self.calculate(
            taxable_total,
            client.withholding_percentage,
            client.withholding_base_percentage
        )

    @staticmethod
    def standard_rate(category: ClientCategory) -> Decimal:
        """Aliquota di ritenuta predefinita per tipologia di cliente."""
        if category == ClientCategory.PROFESSIONAL:
            return PROFESSIONAL_RATE
        return Decimal("0")
