import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from tortoise.transactions import in_transaction

from app.core.config import ORDER_LIST_DEFAULT_LIMIT, ORDER_LIST_MAX_LIMIT
from app.models.order import (
    CateringStatus,
    Order,
    OrderItem,
    OrderItemModifier,
    OrderItemStatus,
    OrderStatus,
    OrderType,
)
from app.schemas.order import CreateOrderRequest
from app.services.master_data import MasterDataGateway
from app.services.order_number import next_order_number
from app.services.pricing import TaxCalculator, no_tax, price_item, price_order
from app.services.errors import OrderShapeError
from app.services.validation import check_amounts_in_range, validate_order_request

log = logging.getLogger("order_service")


@dataclass
class CreatedOrderItem:
    item: OrderItem
    modifiers: List[OrderItemModifier] = field(default_factory=list)


@dataclass
class CreatedOrder:
    """The persisted order graph: header, items, and each item's modifiers."""
    order: Order
    items: List[CreatedOrderItem] = field(default_factory=list)


@dataclass
class OrderPage:
    orders: List[Order]
    limit: int
    offset: int


async def create_order(
    outlet_id: UUID,
    created_by: UUID,
    request: CreateOrderRequest,
    gateway: Optional[MasterDataGateway] = None,
    tax_calculator: TaxCalculator = no_tax,
) -> CreatedOrder:
    """
    Validates, prices, numbers and persists a new order.

    Validation errors (OrderError) are raised before a number is allocated or
    anything is written. The order header, its items and their modifiers are
    written in a single transaction; storage errors propagate unchanged and
    leave nothing behind except a skipped order number.
    """
    gateway = gateway or MasterDataGateway()

    # 1. Validate and resolve current prices (reads only)
    validated = await validate_order_request(outlet_id, request, gateway)

    # 2. Price every line, then the order
    item_totals = [
        price_item(
            item.unit_price,
            item.quantity,
            [(mod.unit_price, mod.quantity) for mod in item.modifiers],
            item.discount,
        )
        for item in validated.items
    ]
    totals = price_order(
        [t.subtotal for t in item_totals],
        validated.discount,
        tax_calculator,
    )
    check_amounts_in_range(item_totals, totals)

    # 3. Allocate the number (committed on its own, never rolled back)
    order_number = await next_order_number(outlet_id)

    is_catering = validated.order_type == OrderType.CATERING

    # 4. Persist the whole graph atomically
    async with in_transaction() as conn:
        order = await Order.create(
            outlet_id=outlet_id,
            order_number=order_number,
            customer_id=validated.customer_id,
            order_type=validated.order_type,
            status=OrderStatus.NEW,
            table_number=validated.table_number,
            notes=validated.notes,
            subtotal=totals.subtotal,
            discount_type=validated.discount.type if validated.discount else None,
            discount_value=validated.discount.value if validated.discount else None,
            discount_amount=totals.discount_amount,
            tax_amount=totals.tax_amount,
            total_amount=totals.total_amount,
            catering_date=validated.catering_date if is_catering else None,
            catering_status=CateringStatus.BOOKED if is_catering else None,
            catering_dp_amount=validated.catering_dp_amount if is_catering else None,
            delivery_platform=validated.delivery_platform,
            delivery_address=validated.delivery_address,
            created_by=created_by,
            using_db=conn,
        )

        created_items = []
        for item, item_total in zip(validated.items, item_totals):
            order_item = await OrderItem.create(
                order=order,
                product_id=item.product_id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                discount_type=item.discount.type if item.discount else None,
                discount_value=item.discount.value if item.discount else None,
                discount_amount=item_total.discount_amount,
                subtotal=item_total.subtotal,
                notes=item.notes,
                status=OrderItemStatus.PENDING,
                station=item.station,
                using_db=conn,
            )

            modifiers = []
            for mod in item.modifiers:
                modifiers.append(await OrderItemModifier.create(
                    order_item=order_item,
                    modifier_id=mod.modifier_id,
                    quantity=mod.quantity,
                    unit_price=mod.unit_price,
                    using_db=conn,
                ))

            created_items.append(CreatedOrderItem(item=order_item, modifiers=modifiers))

    log.info(
        f"Order {order_number} created for outlet {outlet_id}: "
        f"{len(created_items)} item(s), total {totals.total_amount}"
    )
    return CreatedOrder(order=order, items=created_items)


async def get_order(outlet_id: UUID, order_id: UUID) -> Optional[CreatedOrder]:
    """Fetches an order of the outlet with its items and modifiers."""
    # Pre-fetch related entities to minimize DB queries (N+1 avoidance)
    order = await (
        Order.filter(id=order_id, outlet_id=outlet_id)
        .prefetch_related("items__modifiers")
        .first()
    )
    if not order:
        return None
    return CreatedOrder(
        order=order,
        items=[CreatedOrderItem(item=item, modifiers=list(item.modifiers)) for item in order.items],
    )


def _parse_day(value: Optional[str], name: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise OrderShapeError(f"invalid {name} format, use YYYY-MM-DD") from None


async def list_orders(
    outlet_id: UUID,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    status: Optional[str] = None,
    order_type: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> OrderPage:
    """
    Lists the outlet's order headers, newest first.

    A missing or non-positive limit falls back to the default and is capped at
    the maximum; a negative offset counts as 0. Dates are whole UTC days and
    both ends are inclusive. Unknown status or type values and malformed
    dates raise OrderShapeError.
    """
    if not limit or limit <= 0:
        limit = ORDER_LIST_DEFAULT_LIMIT
    limit = min(limit, ORDER_LIST_MAX_LIMIT)
    offset = max(offset or 0, 0)

    filters = {"outlet_id": outlet_id}
    if status:
        try:
            filters["status"] = OrderStatus(status)
        except ValueError:
            raise OrderShapeError("invalid status") from None
    if order_type:
        try:
            filters["order_type"] = OrderType(order_type)
        except ValueError:
            raise OrderShapeError("invalid type") from None

    start = _parse_day(start_date, "start_date")
    end = _parse_day(end_date, "end_date")
    if start:
        filters["created_at__gte"] = start
    if end:
        filters["created_at__lt"] = end + timedelta(days=1)

    orders = await Order.filter(**filters).order_by("-created_at").offset(offset).limit(limit)
    return OrderPage(orders=list(orders), limit=limit, offset=offset)
