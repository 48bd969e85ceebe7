"""
Test policy ritenuta d'acconto e bollo.
"""
from decimal import Decimal

from fatturazione.config import Settings
from fatturazione.models import ClientCategory, DocumentType
from fatturazione.services import StampDutyPolicy, WithholdingPolicy


class TestWithholdingPolicy:

    def test_calculate(self):
        policy = WithholdingPolicy()
        assert policy.calculate(Decimal("1000"), Decimal("20")) == Decimal("200.00")
        assert policy.calculate(Decimal("1000"), Decimal("20"), Decimal("50")) == Decimal("100.00")
        assert policy.calculate(Decimal("1234.56"), Decimal("20")) == Decimal("246.91")

    def test_applies(self, professional_client, pa_client, company_client):
        policy = WithholdingPolicy()
        assert policy.applies(professional_client, flat_rate=False)
        assert not policy.applies(professional_client, flat_rate=True)
        assert not policy.applies(pa_client, flat_rate=False)
        assert not policy.applies(company_client, flat_rate=False)

    def test_amount_for_respects_applies(self, pa_client):
        assert WithholdingPolicy().amount_for(pa_client, Decimal("1000"), flat_rate=False) == Decimal("0.00")

    def test_standard_rate(self):
        assert WithholdingPolicy.standard_rate(ClientCategory.PROFESSIONAL) == Decimal("20")
        assert WithholdingPolicy.standard_rate(ClientCategory.COMPANY) == Decimal("0")
        assert WithholdingPolicy.standard_rate(ClientCategory.PUBLIC_ADMINISTRATION) == Decimal("0")


class TestStampDutyPolicy:

    def test_from_settings(self):
        policy = StampDutyPolicy.from_settings(Settings(STAMP_DUTY_THRESHOLD=Decimal("100"), STAMP_DUTY_AMOUNT=Decimal("2.50")))
        assert policy.calculate(DocumentType.INVOICE, Decimal("100.01"), flat_rate=True) == Decimal("2.50")
        assert policy.calculate(DocumentType.INVOICE, Decimal("100"), flat_rate=True) == Decimal("0.00")

    def test_only_flat_rate(self):
        policy = StampDutyPolicy(Decimal("77.47"), Decimal("2.00"))
        assert policy.applies(DocumentType.INVOICE, Decimal("500"), flat_rate=True)
        assert policy.applies(DocumentType.DEBIT_NOTE, Decimal("500"), flat_rate=True)
        assert not policy.applies(DocumentType.INVOICE, Decimal("500"), flat_rate=False)
        assert not policy.applies(DocumentType.CREDIT_NOTE, Decimal("500"), flat_rate=True)
