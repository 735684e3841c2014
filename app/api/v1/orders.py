import logging
from enum import Enum
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from app.api.deps import Claims, get_claims, require_outlet_access
from app.schemas.response import ErrorResponse, SuccessResponse
from app.schemas.order import (
    CreateOrderRequest,
    OrderItemModifierResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    OrderSummaryResponse,
)
from app.services.errors import OrderError
from app.services.order_service import CreatedOrder, create_order, get_order, list_orders
from app.services.pricing import money
from uuid import UUID

router = APIRouter()
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 500)}
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("uvicorn")


def _money_text(value):
    return None if value is None else str(money(value))


def _enum_value(value):
    return value.value if isinstance(value, Enum) else value


def _int_or_none(value: Optional[str]) -> Optional[int]:
    """Non-numeric paging values fall back to the defaults."""
    try:
        return int(value) if value else None
    except ValueError:
        return None


def _order_fields(o) -> dict:
    return dict(
        id=o.id,
        outlet_id=o.outlet_id,
        order_number=o.order_number,
        customer_id=o.customer_id,
        order_type=_enum_value(o.order_type),
        status=_enum_value(o.status),
        table_number=o.table_number,
        notes=o.notes,
        subtotal=_money_text(o.subtotal),
        discount_type=_enum_value(o.discount_type),
        discount_value=_money_text(o.discount_value),
        discount_amount=_money_text(o.discount_amount),
        tax_amount=_money_text(o.tax_amount),
        total_amount=_money_text(o.total_amount),
        catering_date=o.catering_date,
        catering_status=_enum_value(o.catering_status),
        catering_dp_amount=_money_text(o.catering_dp_amount),
        delivery_platform=o.delivery_platform,
        delivery_address=o.delivery_address,
        created_by=o.created_by,
        created_at=o.created_at,
        updated_at=o.updated_at,
    )


def to_order_response(result: CreatedOrder) -> OrderResponse:
    """Flattens the order graph into the response schema; modifiers default to []."""
    items = []
    for created in result.items:
        i = created.item
        items.append(OrderItemResponse(
            id=i.id,
            product_id=i.product_id,
            variant_id=i.variant_id,
            quantity=i.quantity,
            unit_price=_money_text(i.unit_price),
            discount_type=_enum_value(i.discount_type),
            discount_value=_money_text(i.discount_value),
            discount_amount=_money_text(i.discount_amount),
            subtotal=_money_text(i.subtotal),
            notes=i.notes,
            status=_enum_value(i.status),
            station=_enum_value(i.station),
            modifiers=[
                OrderItemModifierResponse(
                    id=m.id,
                    modifier_id=m.modifier_id,
                    quantity=m.quantity,
                    unit_price=_money_text(m.unit_price),
                )
                for m in created.modifiers
            ],
        ))

    return OrderResponse(**_order_fields(result.order), items=items)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def create_order_endpoint(
    outlet_id: UUID,
    request_data: CreateOrderRequest,
    claims: Claims = Depends(get_claims),
):
    """
    Creates an order for the outlet. Validation errors come back as 400 with
    the error code and, for item-level errors, the item index.
    """
    require_outlet_access(claims, outlet_id)
    try:
        result = await create_order(
            outlet_id=outlet_id,
            created_by=claims.user_id,
            request=request_data,
        )
    except OrderError:
        # Mapped to 400 by the registered OrderError handler
        raise
    except Exception as e:
        log.exception(f"Error creating order for outlet {outlet_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create order.")

    log.info(f"Order {result.order.order_number} created by user {claims.user_id}.")
    data = to_order_response(result).model_dump(mode="json")
    return SuccessResponse(data=data)


@router.get("", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def list_orders_endpoint(
    outlet_id: UUID,
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    type_filter: Optional[str] = Query(None, alias="type"),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    claims: Claims = Depends(get_claims),
):
    """Lists the outlet's orders, newest first, without items."""
    require_outlet_access(claims, outlet_id)
    try:
        page = await list_orders(
            outlet_id,
            limit=_int_or_none(limit),
            offset=_int_or_none(offset),
            status=status_filter,
            order_type=type_filter,
            start_date=start_date,
            end_date=end_date,
        )
    except OrderError:
        raise
    except Exception as e:
        log.exception(f"Error listing orders for outlet {outlet_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to list orders.")

    data = OrderListResponse(
        orders=[OrderSummaryResponse(**_order_fields(o)) for o in page.orders],
        limit=page.limit,
        offset=page.offset,
    ).model_dump(mode="json")
    return SuccessResponse(data=data)


@router.get("/{order_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def get_order_endpoint(
    outlet_id: UUID,
    order_id: UUID,
    claims: Claims = Depends(get_claims),
):
    """Fetches an order with its items and modifiers."""
    require_outlet_access(claims, outlet_id)
    try:
        result = await get_order(outlet_id, order_id)
    except Exception as e:
        log.exception(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch order details.")

    if not result:
        raise HTTPException(status_code=404, detail="Order not found")

    data = to_order_response(result).model_dump(mode="json")
    return SuccessResponse(data=data)
