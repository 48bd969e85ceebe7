"""
Calcolo dei totali di documento.

FLUSSO:
-------
1. Imponibile di riga prima dello sconto di documento
2. Ripartizione proporzionale dello sconto di documento
3. IVA di riga (0 in regime forfettario) e riepilogo per aliquota
4. Ritenuta sul totale imponibile (mai sul totale con IVA)
5. Bollo per i documenti forfettari oltre soglia
6. Split payment: IVA versata dal cliente PA, esclusa dal netto da incassare

Il calcolo è una funzione pura di righe, sconto di documento, attributi
fiscali del cliente e regime: ricalcolare due volte dà lo stesso risultato.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Optional

from fatturazione.models import Client, Document, DocumentTotals, VatExigibility
from fatturazione.services.line_item_calculator import (
    calculate_item,
    distribute_document_discount,
    effective_rate,
    pre_discount_base
)
from fatturazione.services.stamp_duty_policy import StampDutyPolicy
from fatturazione.services.withholding_policy import WithholdingPolicy
from fatturazione.utils.money import ZERO, money_sum, round2


class DocumentAggregator:
    """Produce righe calcolate e totali di un documento."""

    def __init__(
        self,
        withholding_policy: Optional[WithholdingPolicy] = None,
        stamp_duty_policy: Optional[StampDutyPolicy] = None
    ):
        self.withholding_policy = withholding_policy or WithholdingPolicy()
        self.stamp_duty_policy = stamp_duty_policy or StampDutyPolicy.from_settings()

    @staticmethod
    def is_flat_rate(document: Document, client: Client) -> bool:
        return document.is_regime_forfettario or client.is_regime_forfettario

    def compute(self, document: Document, client: Client) -> Document:
        """
        Ricalcola righe e totali.

        Args:
            document: Documento con righe già validate
            client: Cliente risolto dal chiamante (client_id del documento)

        Returns:
            Nuovo documento; l'originale non viene modificato
        """
        flat_rate = self.is_flat_rate(document, client)

        bases = [pre_discount_base(item) for item in document.items]
        shares = distribute_document_discount(
            bases,
            document.document_discount_percentage,
            document.document_discount_amount
        )
        items = [
            calculate_item(item, share, flat_rate)
            for item, share in zip(document.items, shares)
        ]

        taxable_total = money_sum(item.taxable_base for item in items)
        tax_total = money_sum(item.tax_amount for item in items)

        tax_by_rate: Dict[int, Decimal] = defaultdict(lambda: ZERO)
        for item in items:
            tax_by_rate[effective_rate(item, flat_rate)] += item.tax_amount

        subtotal = round2(taxable_total + tax_total)

        # Base della ritenuta: taxable_total, non subtotal
        withholding_amount = self.withholding_policy.amount_for(client, taxable_total, flat_rate)
        stamp_duty_amount = self.stamp_duty_policy.calculate(
            document.document_type, taxable_total, flat_rate
        )
        total_due = round2(subtotal - withholding_amount + stamp_duty_amount)

        split_payment = client.subject_to_split_payment and not flat_rate
        split_payment_vat = tax_total if split_payment else ZERO

        totals = DocumentTotals(
            taxable_total=taxable_total,
            tax_total=tax_total,
            subtotal=subtotal,
            withholding_amount=withholding_amount,
            stamp_duty_amount=stamp_duty_amount,
            total_due=total_due,
            tax_by_rate={rate: round2(amount) for rate, amount in sorted(tax_by_rate.items(), reverse=True)},
            vat_exigibility=VatExigibility.SPLIT_PAYMENT if split_payment else VatExigibility.IMMEDIATE,
            split_payment_vat=split_payment_vat,
            amount_payable=round2(total_due - split_payment_vat)
        )

        return document.model_copy(update={"items": items, "totals": totals})
