"""
Test configuration and fixtures for pytest.
Everything runs against the in-memory stores: no database required.
"""
from decimal import Decimal

import pytest

from fatturazione.models import (
    ActorContext,
    Client,
    ClientCategory,
    Document,
    DocumentStatus
)
from fatturazione.repositories import (
    InMemoryClientStore,
    InMemoryDocumentStore,
    InMemorySequenceStore
)
from fatturazione.services import (
    DocumentAggregator,
    DocumentService,
    NoteDeriver,
    NumberingAllocator,
    StampDutyPolicy,
    WithholdingPolicy
)

from factories import TODAY, make_document, make_item


@pytest.fixture
def company_client() -> Client:
    return Client(
        name="Alfa Srl",
        vat_number="12345678903",
        email="amministrazione@alfa.it",
        category=ClientCategory.COMPANY
    )


@pytest.fixture
def professional_client() -> Client:
    """Professionista soggetto a ritenuta 20% sul 100% dell'imponibile."""
    return Client(
        name="Studio Rossi",
        vat_number="01234567897",
        tax_code="RSSMRA85T10A562S",
        email="info@studiorossi.it",
        category=ClientCategory.PROFESSIONAL,
        subject_to_withholding=True,
        withholding_percentage=Decimal("20"),
        withholding_base_percentage=Decimal("100")
    )


@pytest.fixture
def pa_client() -> Client:
    """PA in split payment; il flag ritenuta non deve avere effetto."""
    return Client(
        name="Comune di Esempio",
        tax_code="01234567897",
        email="protocollo@comune.esempio.it",
        category=ClientCategory.PUBLIC_ADMINISTRATION,
        subject_to_split_payment=True,
        subject_to_withholding=True,
        office_code="UF1234"
    )


@pytest.fixture
def forfettario_client() -> Client:
    return Client(
        name="Mario Rossi",
        tax_code="RSSMRA85T10A562S",
        email="mario@rossi.it",
        category=ClientCategory.PROFESSIONAL,
        is_regime_forfettario=True,
        subject_to_withholding=True
    )


@pytest.fixture
def aggregator() -> DocumentAggregator:
    return DocumentAggregator(WithholdingPolicy(), StampDutyPolicy(Decimal("77.47"), Decimal("2.00")))


@pytest.fixture
def note_deriver(aggregator) -> NoteDeriver:
    return NoteDeriver(aggregator, due_days=30)


@pytest.fixture
def actor() -> ActorContext:
    return ActorContext(user_id="u-1", user_name="Contabile")


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def client_store(company_client, professional_client, pa_client, forfettario_client) -> InMemoryClientStore:
    return InMemoryClientStore([company_client, professional_client, pa_client, forfettario_client])


@pytest.fixture
def sequence_store() -> InMemorySequenceStore:
    return InMemorySequenceStore()


@pytest.fixture
def allocator(sequence_store, document_store) -> NumberingAllocator:
    return NumberingAllocator(
        sequence_store,
        fallback_last_number=document_store.get_last_document_number,
        today=lambda: TODAY
    )


@pytest.fixture
def service(document_store, client_store, allocator, aggregator, note_deriver) -> DocumentService:
    return DocumentService(
        document_store,
        client_store,
        allocator,
        aggregator=aggregator,
        note_deriver=note_deriver,
        today=lambda: TODAY
    )


@pytest.fixture
def issued_invoice(aggregator, company_client) -> Document:
    """Fattura emessa da 1000 + IVA 22% = 1220."""
    document = aggregator.compute(make_document(company_client, make_item("1000")), company_client)
    return document.model_copy(update={
        "number": "2026/001",
        "number_ordinal": 1,
        "status": DocumentStatus.ISSUED
    })
