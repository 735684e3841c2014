"""
Pure order pricing. No I/O: every function works on already-resolved prices.

All amounts are Decimal, rounded half-up to 2 places at each rounding point.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Iterable, Optional, Sequence, Tuple

from app.models.order import DiscountType

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Largest value a DecimalField(max_digits=12, decimal_places=2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")

# Receives the discounted order subtotal, returns the tax to add on top of it.
TaxCalculator = Callable[[Decimal], Decimal]


def money(value) -> Decimal:
    """Rounds to 2 decimal places, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def no_tax(taxable_amount: Decimal) -> Decimal:
    """Placeholder tax rule until a tax engine exists: always 0.00."""
    return ZERO


@dataclass(frozen=True)
class Discount:
    type: DiscountType
    value: Decimal


@dataclass(frozen=True)
class ItemTotals:
    pre_discount_amount: Decimal
    discount_amount: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def discount_amount(amount: Decimal, discount: Optional[Discount]) -> Decimal:
    """
    PERCENTAGE: round(amount * value / 100, 2). FIXED_AMOUNT: min(value, amount).
    The result is always within [0, amount].
    """
    if discount is None:
        return ZERO
    if discount.type == DiscountType.PERCENTAGE:
        result = money(amount * discount.value / HUNDRED)
    else:
        result = money(min(discount.value, amount))
    return min(max(result, ZERO), amount)


def price_item(
    unit_price: Decimal,
    quantity: int,
    modifiers: Iterable[Tuple[Decimal, int]] = (),
    discount: Optional[Discount] = None,
) -> ItemTotals:
    """
    Prices one line: unit_price * quantity plus each modifier's
    unit_price * quantity, minus the item discount, floored at 0.
    The discount applies to the whole line including modifiers.
    """
    pre_discount = unit_price * quantity + sum(
        (mod_price * mod_qty for mod_price, mod_qty in modifiers), ZERO
    )
    pre_discount = money(pre_discount)
    item_discount = discount_amount(pre_discount, discount)
    subtotal = max(pre_discount - item_discount, ZERO)
    return ItemTotals(
        pre_discount_amount=pre_discount,
        discount_amount=item_discount,
        subtotal=subtotal,
    )


def price_order(
    item_subtotals: Sequence[Decimal],
    discount: Optional[Discount] = None,
    tax_calculator: TaxCalculator = no_tax,
) -> OrderTotals:
    subtotal = money(sum(item_subtotals, ZERO))
    order_discount = discount_amount(subtotal, discount)
    tax_amount = money(tax_calculator(subtotal - order_discount))
    return OrderTotals(
        subtotal=subtotal,
        discount_amount=order_discount,
        tax_amount=tax_amount,
        total_amount=subtotal - order_discount + tax_amount,
    )
