import logging
from uuid import UUID

from tortoise.transactions import in_transaction

from app.core.config import ORDER_NUMBER_PREFIX, ORDER_NUMBER_WIDTH
from app.models.sequence import OrderNumberSequence

log = logging.getLogger("order_number")


def format_order_number(value: int, prefix: str = ORDER_NUMBER_PREFIX, width: int = ORDER_NUMBER_WIDTH) -> str:
    """Renders e.g. 3 as 'KWR-003'. Values wider than `width` are not truncated."""
    return f"{prefix}-{value:0{width}d}"


async def next_order_number(outlet_id: UUID) -> str:
    """
    Hands out the next order number for an outlet.

    The counter row is locked with SELECT ... FOR UPDATE, so concurrent callers
    on any instance queue on the row and each sees the previous caller's value.
    The increment commits in its own transaction before the order is written:
    a failed order leaves a gap, never a reused number.
    """
    # Creates the counter on the outlet's first order; get_or_create retries
    # the lookup if a concurrent caller inserted it first.
    await OrderNumberSequence.get_or_create(outlet_id=outlet_id, defaults={"last_value": 0})

    async with in_transaction() as conn:
        sequence = await (
            OrderNumberSequence.filter(outlet_id=outlet_id)
            .using_db(conn)
            .select_for_update()
            .get()
        )
        sequence.last_value += 1
        await sequence.save(update_fields=["last_value", "updated_at"], using_db=conn)
        value = sequence.last_value

    order_number = format_order_number(value)
    log.debug(f"Allocated order number {order_number} for outlet {outlet_id}")
    return order_number
