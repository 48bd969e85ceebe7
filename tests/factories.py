"""
Builders for test documents.
"""
from datetime import date
from decimal import Decimal

from fatturazione.models import Client, Document, DocumentInput, IvaRate, LineItem

TODAY = date(2026, 3, 15)

CAUSALE_FORFETTARIO = (
    "Operazione effettuata ai sensi dell'art. 1, commi 54-89, Legge n. 190/2014 "
    "(regime forfettario)"
)


def make_item(unit_price, quantity="1", rate=IvaRate.STANDARD, description="Consulenza", **kwargs) -> LineItem:
    return LineItem(
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        iva_rate=rate,
        **kwargs
    )


def make_document(client: Client, *items: LineItem, **kwargs) -> Document:
    return Document(
        client_id=client.id,
        issue_date=kwargs.pop("issue_date", TODAY),
        due_date=kwargs.pop("due_date", date(2026, 4, 14)),
        items=list(items),
        **kwargs
    )


def make_input(client: Client, *items: LineItem, **kwargs) -> DocumentInput:
    return DocumentInput(
        client_id=client.id,
        issue_date=kwargs.pop("issue_date", TODAY),
        items=list(items),
        **kwargs
    )
