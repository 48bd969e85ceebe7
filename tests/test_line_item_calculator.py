"""
Test calcolo righe e sconto di documento.
"""
from decimal import Decimal, ROUND_HALF_UP

import pytest

from fatturazione.models import IvaRate
from fatturazione.services.line_item_calculator import (
    apply_document_discount,
    calculate_item,
    distribute_document_discount,
    pre_discount_base
)

from factories import make_item


class TestCalculateItem:

    def test_total_is_base_plus_tax(self):
        item = calculate_item(make_item("19.99", quantity="3"))

        assert item.taxable_base == Decimal("59.97")
        assert item.tax_amount == Decimal("13.19")  # 13.1934
        assert item.total == Decimal("73.16")
        assert item.total == item.taxable_base + item.tax_amount

    @pytest.mark.parametrize("rate", list(IvaRate))
    def test_tax_is_rounded_base_times_rate(self, rate):
        item = calculate_item(make_item("123.45", quantity="7", rate=rate))
        expected = (item.taxable_base * Decimal(int(rate)) / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        assert item.tax_amount == expected

    def test_half_rounds_away_from_zero(self):
        assert calculate_item(make_item("0.25", rate=IvaRate.REDUCED)).tax_amount == Decimal("0.03")
        assert calculate_item(make_item("-0.25", rate=IvaRate.REDUCED)).tax_amount == Decimal("-0.03")

    def test_percentage_discount_wins_over_amount(self):
        item = make_item("100", discount_percentage=Decimal("10"), discount_amount=Decimal("50"))
        assert pre_discount_base(item) == Decimal("90.00")

    def test_fixed_discount(self):
        item = make_item("100", quantity="2", discount_amount=Decimal("15"))
        assert pre_discount_base(item) == Decimal("185.00")

    def test_document_share_reduces_base(self):
        item = calculate_item(make_item("100"), document_share=Decimal("10.00"))
        assert item.taxable_base == Decimal("90.00")
        assert item.tax_amount == Decimal("19.80")

    def test_flat_rate_charges_no_vat(self):
        item = calculate_item(make_item("100"), flat_rate=True)
        assert item.tax_amount == Decimal("0.00")
        assert item.total == Decimal("100.00")

    def test_input_item_not_modified(self):
        original = make_item("100")
        calculate_item(original)
        assert original.taxable_base == Decimal("0.00")


class TestDocumentDiscount:

    def test_percentage_then_amount(self):
        assert apply_document_discount(Decimal("100"), Decimal("10"), Decimal("5")) == Decimal("85.00")

    def test_never_below_zero(self):
        assert apply_document_discount(Decimal("50"), Decimal("0"), Decimal("80")) == Decimal("0.00")

    def test_negative_total_stays_negative(self):
        assert apply_document_discount(Decimal("-100"), Decimal("10"), Decimal("0")) == Decimal("-90.00")
        assert apply_document_discount(Decimal("-100"), Decimal("0"), Decimal("-10")) == Decimal("-90.00")
        assert apply_document_discount(Decimal("-50"), Decimal("0"), Decimal("-80")) == Decimal("0.00")

    def test_proportional_distribution(self):
        shares = distribute_document_discount([Decimal("100.00"), Decimal("200.00")], Decimal("10"), Decimal("0"))
        assert shares == [Decimal("10.00"), Decimal("20.00")]

    def test_residual_cent_goes_to_largest_item(self):
        bases = [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
        shares = distribute_document_discount(bases, Decimal("0"), Decimal("10"))

        assert shares == [Decimal("3.33"), Decimal("3.33"), Decimal("3.34")]
        assert sum(shares) == Decimal("10.00")

    def test_no_discount(self):
        assert distribute_document_discount([Decimal("10"), Decimal("20")], Decimal("0"), Decimal("0")) == [
            Decimal("0.00"), Decimal("0.00")
        ]
        assert distribute_document_discount([], Decimal("10"), Decimal("0")) == []
