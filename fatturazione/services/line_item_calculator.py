"""
Calcolo delle righe documento.

Imponibile di riga = quantità × prezzo unitario, meno lo sconto di riga,
meno la quota dello sconto di documento. IVA = imponibile × aliquota / 100.
Gli importi sono arrotondati al centesimo una sola volta, sul valore monetario
finale (ROUND_HALF_UP: metà lontano da zero).
"""
from decimal import Decimal
from typing import List, Optional

from fatturazione.models import LineItem
from fatturazione.utils.money import ZERO, round2, percentage_of


def item_discount(item: LineItem) -> Decimal:
    """Sconto di riga: la percentuale, se presente, prevale sull'importo fisso."""
    if item.discount_percentage > 0:
        return percentage_of(item.gross_amount, item.discount_percentage)
    return item.discount_amount


def pre_discount_base(item: LineItem) -> Decimal:
    """Imponibile di riga prima dello sconto di documento."""
    return round2(item.gross_amount - item_discount(item))


def apply_document_discount(total: Decimal, percentage: Decimal, amount: Decimal) -> Decimal:
    """
    Applica lo sconto di documento a un imponibile complessivo.

    Prima la percentuale, poi l'importo fisso. Il risultato non cambia mai
    segno (una nota di credito resta negativa, una fattura resta positiva).
    """
    result = total
    if percentage > 0:
        result -= percentage_of(result, percentage)
    if amount:
        result -= amount

    if total >= 0:
        result = max(result, ZERO)
    else:
        result = min(result, ZERO)
    return round2(result)


def distribute_document_discount(
    bases: List[Decimal],
    percentage: Decimal,
    amount: Decimal
) -> List[Decimal]:
    """
    Ripartisce lo sconto di documento sulle righe in proporzione agli imponibili.

    Returns:
        Quota di sconto per riga, nello stesso ordine di `bases`. La somma delle
        quote è esattamente lo sconto complessivo: il resto dell'arrotondamento
        va alla riga di importo maggiore.
    """
    if not bases:
        return []

    total = sum(bases, ZERO)
    discount = total - apply_document_discount(total, percentage, amount)
    if discount == 0 or total == 0:
        return [ZERO for _ in bases]

    shares = [round2(discount * base / total) for base in bases]
    residual = discount - sum(shares, ZERO)
    if residual:
        largest = max(range(len(bases)), key=lambda i: abs(bases[i]))
        shares[largest] += residual
    return shares


def effective_rate(item: LineItem, flat_rate: bool) -> int:
    """Aliquota applicata: 0 in regime forfettario."""
    return 0 if flat_rate else int(item.iva_rate)


def calculate_item(
    item: LineItem,
    document_share: Optional[Decimal] = None,
    flat_rate: bool = False
) -> LineItem:
    """
    Calcola imponibile, IVA e totale di una riga.

    Args:
        item: Riga già validata (quantità > 0, prezzo >= 0)
        document_share: Quota dello sconto di documento attribuita alla riga
        flat_rate: Regime forfettario, nessuna IVA addebitata

    Returns:
        Nuova riga con i campi derivati valorizzati
    """
    taxable_base = pre_discount_base(item) - (document_share or ZERO)
    rate = effective_rate(item, flat_rate)
    tax_amount = round2(percentage_of(taxable_base, Decimal(rate)))

    return item.model_copy(update={
        "taxable_base": taxable_base,
        "tax_amount": tax_amount,
        "total": taxable_base + tax_amount
    })
