"""
Order request validation pipeline.

Checks run in a fixed order and stop at the first failure, so callers always
see the same error for the same request:

1. order_type present
2. order_type is a known OrderType
3. items present
4. per item (index order): product_id present, quantity > 0, modifier shape
5. catering_date present and parseable for CATERING orders
6. order-level discount, customer_id and catering deposit
7. per item (index order): product/variant/modifier lookups and item discount

Steps 1-6 do no I/O. Step 7 only reads master data. Once the order is priced,
check_amounts_in_range rejects totals too large to store.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from uuid import UUID

from app.models.catalog import KitchenStation
from app.models.order import DiscountType, OrderType
from app.schemas.order import CreateOrderRequest, OrderItemRequest
from app.services.errors import (
    CateringDateRequired,
    InvalidDiscount,
    InvalidOrderType,
    ModifierNotFound,
    OrderError,
    OrderShapeError,
    ProductNotFound,
    VariantNotFound,
)
from app.services.master_data import MasterDataGateway
from app.services.pricing import MAX_AMOUNT, Discount, ItemTotals, OrderTotals

# Upper bound of the int4 quantity columns.
MAX_QUANTITY = 2**31 - 1


@dataclass
class ValidatedModifier:
    modifier_id: UUID
    quantity: int
    unit_price: Decimal


@dataclass
class ValidatedItem:
    product_id: UUID
    variant_id: Optional[UUID]
    quantity: int
    unit_price: Decimal
    station: Optional[KitchenStation]
    notes: Optional[str] = None
    discount: Optional[Discount] = None
    modifiers: List[ValidatedModifier] = field(default_factory=list)


@dataclass
class ValidatedOrder:
    """A request that passed every check, with prices resolved from master data."""
    outlet_id: UUID
    order_type: OrderType
    items: List[ValidatedItem]
    discount: Optional[Discount] = None
    customer_id: Optional[UUID] = None
    table_number: Optional[str] = None
    notes: Optional[str] = None
    catering_date: Optional[datetime] = None
    catering_dp_amount: Optional[Decimal] = None
    delivery_platform: Optional[str] = None
    delivery_address: Optional[str] = None


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _optional_text(value: Optional[str]) -> Optional[str]:
    return value if _present(value) else None


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def _parse_decimal(value: Optional[str]) -> Optional[Decimal]:
    """Returns a finite Decimal in [0, MAX_AMOUNT], or None if the text is not one."""
    if not _present(value):
        return None
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not parsed.is_finite() or parsed < 0 or parsed > MAX_AMOUNT:
        return None
    return parsed


def _parse_catering_date(value: Optional[str]) -> Optional[datetime]:
    """RFC 3339 only: a date and a time with an offset (or Z)."""
    if not _present(value):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def parse_order_type(value: Optional[str]) -> OrderType:
    """Steps 1 and 2."""
    if not _present(value):
        raise OrderShapeError("order_type is required")
    try:
        return OrderType(value.strip())
    except ValueError:
        raise InvalidOrderType() from None


def parse_discount(discount_type: Optional[str], discount_value: Optional[str]) -> Optional[Discount]:
    """A discount only exists when a type is given; the value is then required."""
    if not _present(discount_type):
        return None
    try:
        kind = DiscountType(discount_type.strip())
    except ValueError:
        raise InvalidDiscount("invalid discount_type") from None
    value = _parse_decimal(discount_value)
    if value is None:
        raise InvalidDiscount("invalid discount_value")
    return Discount(type=kind, value=value)


def check_item_shape(index: int, item: OrderItemRequest) -> None:
    """Step 4 for one item."""
    if not _present(item.product_id):
        raise OrderShapeError("product_id is required", index=index)
    if item.quantity is None or item.quantity <= 0:
        raise OrderShapeError("quantity must be > 0", index=index)
    if item.quantity > MAX_QUANTITY:
        raise OrderShapeError("quantity is too large", index=index)
    for mod_index, modifier in enumerate(item.modifiers):
        if not _present(modifier.modifier_id):
            raise OrderShapeError("modifier_id is required", index=index, modifier_index=mod_index)
        if modifier.quantity <= 0:
            raise OrderShapeError("quantity must be > 0", index=index, modifier_index=mod_index)
        if modifier.quantity > MAX_QUANTITY:
            raise OrderShapeError("quantity is too large", index=index, modifier_index=mod_index)


def check_request_shape(outlet_id: UUID, request: CreateOrderRequest) -> ValidatedOrder:
    """
    Steps 1-6: everything that can be decided without touching storage.
    Returns a ValidatedOrder without items; resolve_item builds them.
    """
    order_type = parse_order_type(request.order_type)

    if not request.items:
        raise OrderShapeError("items are required")
    for index, item in enumerate(request.items):
        check_item_shape(index, item)

    catering_date = None
    catering_dp_amount = None
    if order_type == OrderType.CATERING:
        if not _present(request.catering_date):
            raise CateringDateRequired()
        catering_date = _parse_catering_date(request.catering_date)
        if catering_date is None:
            raise CateringDateRequired("catering_date must be an RFC 3339 timestamp")
        if _present(request.catering_dp_amount):
            catering_dp_amount = _parse_decimal(request.catering_dp_amount)
            if catering_dp_amount is None:
                raise OrderShapeError("invalid catering_dp_amount")

    discount = parse_discount(request.discount_type, request.discount_value)

    customer_id = None
    if _present(request.customer_id):
        customer_id = _parse_uuid(request.customer_id)
        if customer_id is None:
            raise OrderShapeError("invalid customer_id")

    delivery_platform = None
    delivery_address = None
    if order_type == OrderType.DELIVERY:
        delivery_platform = _optional_text(request.delivery_platform)
        delivery_address = _optional_text(request.delivery_address)

    return ValidatedOrder(
        outlet_id=outlet_id,
        order_type=order_type,
        items=[],
        discount=discount,
        customer_id=customer_id,
        table_number=_optional_text(request.table_number),
        notes=_optional_text(request.notes),
        catering_date=catering_date,
        catering_dp_amount=catering_dp_amount,
        delivery_platform=delivery_platform,
        delivery_address=delivery_address,
    )


async def resolve_item(
    gateway: MasterDataGateway, outlet_id: UUID, index: int, item: OrderItemRequest
) -> ValidatedItem:
    """Step 7 for one item. Errors are tagged with the item (and modifier) index."""
    try:
        product_id = _parse_uuid(item.product_id)
        if product_id is None:
            raise ProductNotFound("invalid product_id")

        variant_id = None
        if _present(item.variant_id):
            variant_id = _parse_uuid(item.variant_id)
            if variant_id is None:
                raise VariantNotFound("invalid variant_id")

        quote = await gateway.resolve_item_pricing(outlet_id, product_id, variant_id)

        modifiers = []
        for mod_index, modifier in enumerate(item.modifiers):
            try:
                modifier_id = _parse_uuid(modifier.modifier_id)
                if modifier_id is None:
                    raise ModifierNotFound("invalid modifier_id")
                mod_quote = await gateway.resolve_modifier_pricing(product_id, modifier_id)
            except OrderError as e:
                raise e.at(index, mod_index)
            modifiers.append(ValidatedModifier(
                modifier_id=modifier_id,
                quantity=modifier.quantity,
                unit_price=mod_quote.unit_price,
            ))

        discount = parse_discount(item.discount_type, item.discount_value)
    except OrderError as e:
        if e.index is None:
            e.at(index)
        raise

    return ValidatedItem(
        product_id=product_id,
        variant_id=variant_id,
        quantity=item.quantity,
        unit_price=quote.unit_price,
        station=quote.station,
        notes=_optional_text(item.notes),
        discount=discount,
        modifiers=modifiers,
    )


async def validate_order_request(
    outlet_id: UUID, request: CreateOrderRequest, gateway: MasterDataGateway
) -> ValidatedOrder:
    """Runs the whole pipeline. Raises the first OrderError encountered."""
    validated = check_request_shape(outlet_id, request)
    for index, item in enumerate(request.items):
        validated.items.append(await resolve_item(gateway, outlet_id, index, item))
    return validated


def check_amounts_in_range(item_totals: List[ItemTotals], totals: OrderTotals) -> None:
    """Rejects a priced order whose line or order amounts would not fit the money columns."""
    for index, item_total in enumerate(item_totals):
        if item_total.pre_discount_amount > MAX_AMOUNT:
            raise OrderShapeError("item amount is too large", index=index)
    if max(totals.subtotal, totals.tax_amount, totals.total_amount) > MAX_AMOUNT:
        raise OrderShapeError("order total is too large")
