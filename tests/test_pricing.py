from decimal import Decimal

import pytest

from app.models.order import DiscountType
from app.services.pricing import (
    Discount,
    discount_amount,
    money,
    no_tax,
    price_item,
    price_order,
)


def D(value):
    return Decimal(value)


class TestDiscountAmount:
    def test_percentage_rounds_half_up(self):
        # 12.50 * 1% = 0.125 -> 0.13
        assert discount_amount(D("12.50"), Discount(DiscountType.PERCENTAGE, D("1"))) == D("0.13")
        # 10.05 * 5% = 0.5025 -> 0.50
        assert discount_amount(D("10.05"), Discount(DiscountType.PERCENTAGE, D("5"))) == D("0.50")

    def test_percentage_above_hundred_is_clamped(self):
        assert discount_amount(D("80.00"), Discount(DiscountType.PERCENTAGE, D("150"))) == D("80.00")

    def test_fixed_amount_is_capped_at_amount(self):
        assert discount_amount(D("30000.00"), Discount(DiscountType.FIXED_AMOUNT, D("5000"))) == D("5000.00")
        assert discount_amount(D("3000.00"), Discount(DiscountType.FIXED_AMOUNT, D("5000"))) == D("3000.00")

    def test_fixed_amount_is_capped_before_rounding(self):
        # min(v, s) first, then half-up: 2500.005 -> 2500.01; a value above s yields s exactly
        assert discount_amount(D("30000.00"), Discount(DiscountType.FIXED_AMOUNT, D("2500.005"))) == D("2500.01")
        assert discount_amount(D("3000.00"), Discount(DiscountType.FIXED_AMOUNT, D("3000.004"))) == D("3000.00")

    def test_no_discount(self):
        assert discount_amount(D("100.00"), None) == D("0.00")

    @pytest.mark.parametrize("amount,value", [
        ("0.00", "10"), ("0.01", "50"), ("99.99", "33.33"), ("50000.00", "100"), ("1234.56", "0"),
    ])
    def test_percentage_stays_within_bounds(self, amount, value):
        s = D(amount)
        result = discount_amount(s, Discount(DiscountType.PERCENTAGE, D(value)))
        assert result == money(s * D(value) / 100)
        assert D("0") <= result <= s


class TestPriceItem:
    def test_quantity_times_unit_price(self):
        totals = price_item(D("12500.00"), 2)
        assert str(totals.subtotal) == "25000.00"
        assert totals.discount_amount == D("0.00")

    def test_modifiers_are_added_to_the_line(self):
        totals = price_item(D("25000.00"), 1, [(D("5000.00"), 1)])
        assert str(totals.subtotal) == "30000.00"

    def test_item_discount_includes_modifiers(self):
        totals = price_item(
            D("10000.00"), 1, [(D("2000.00"), 1)],
            Discount(DiscountType.PERCENTAGE, D("10")),
        )
        assert totals.pre_discount_amount == D("12000.00")
        assert totals.discount_amount == D("1200.00")
        assert totals.subtotal == D("10800.00")

    def test_fixed_item_discount_never_goes_negative(self):
        totals = price_item(D("5000.00"), 1, discount=Discount(DiscountType.FIXED_AMOUNT, D("9000")))
        assert totals.discount_amount == D("5000.00")
        assert totals.subtotal == D("0.00")

    def test_subtotal_identity(self):
        mods = [(D("1500.00"), 2), (D("750.50"), 1)]
        totals = price_item(D("18000.00"), 3, mods, Discount(DiscountType.FIXED_AMOUNT, D("1000")))
        expected = D("18000.00") * 3 + D("1500.00") * 2 + D("750.50") - totals.discount_amount
        assert totals.subtotal == expected


class TestPriceOrder:
    def test_percentage_order_discount(self):
        totals = price_order([D("30000.00"), D("20000.00")], Discount(DiscountType.PERCENTAGE, D("10")))
        assert str(totals.subtotal) == "50000.00"
        assert str(totals.discount_amount) == "5000.00"
        assert str(totals.total_amount) == "45000.00"

    def test_fixed_order_discount_clamped_to_subtotal(self):
        totals = price_order([D("10000.00")], Discount(DiscountType.FIXED_AMOUNT, D("25000")))
        assert totals.discount_amount == D("10000.00")
        assert totals.total_amount == D("0.00")

    def test_default_tax_is_zero(self):
        totals = price_order([D("25000.00")])
        assert str(totals.tax_amount) == "0.00"
        assert no_tax(D("100.00")) == D("0.00")

    def test_injected_tax_is_applied_after_discount(self):
        totals = price_order(
            [D("50000.00")],
            Discount(DiscountType.PERCENTAGE, D("10")),
            tax_calculator=lambda taxable: taxable * D("0.11"),
        )
        assert totals.tax_amount == D("4950.00")
        assert totals.total_amount == D("49950.00")

    @pytest.mark.parametrize("subtotals,discount", [
        (["10.00", "20.05"], None),
        (["0.01"], Discount(DiscountType.PERCENTAGE, D("50"))),
        (["999.99", "0.01", "12.34"], Discount(DiscountType.FIXED_AMOUNT, D("13.5"))),
        (["100.00"], Discount(DiscountType.PERCENTAGE, D("12.5"))),
    ])
    def test_total_identity(self, subtotals, discount):
        totals = price_order([D(s) for s in subtotals], discount)
        assert totals.subtotal == sum(D(s) for s in subtotals)
        assert totals.total_amount == totals.subtotal - totals.discount_amount + totals.tax_amount
        assert D("0") <= totals.discount_amount <= totals.subtotal
