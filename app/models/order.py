from enum import Enum
from tortoise import fields, models
import uuid

from app.models.catalog import KitchenStation


class OrderType(str, Enum):
    DINE_IN = "DINE_IN"
    TAKEAWAY = "TAKEAWAY"
    DELIVERY = "DELIVERY"
    CATERING = "CATERING"


class OrderStatus(str, Enum):
    NEW = "NEW"  # Only status produced at creation time
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderItemStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"


class CateringStatus(str, Enum):
    BOOKED = "BOOKED"
    DP_PAID = "DP_PAID"
    SETTLED = "SETTLED"
    CANCELLED = "CANCELLED"


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    outlet = fields.ForeignKeyField("models.Outlet", related_name="orders")
    order_number = fields.CharField(max_length=20)
    customer_id = fields.UUIDField(null=True)
    order_type = fields.CharEnumField(OrderType)
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.NEW)
    table_number = fields.CharField(max_length=20, null=True)
    notes = fields.TextField(null=True)
    subtotal = fields.DecimalField(max_digits=12, decimal_places=2)
    discount_type = fields.CharEnumField(DiscountType, null=True)
    discount_value = fields.DecimalField(max_digits=12, decimal_places=2, null=True)
    discount_amount = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_amount = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = fields.DecimalField(max_digits=12, decimal_places=2)
    catering_date = fields.DatetimeField(null=True)
    catering_status = fields.CharEnumField(CateringStatus, null=True)
    catering_dp_amount = fields.DecimalField(max_digits=12, decimal_places=2, null=True)
    delivery_platform = fields.CharField(max_length=50, null=True)
    delivery_address = fields.TextField(null=True)
    created_by = fields.UUIDField()
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        unique_together = (("outlet", "order_number"),)
        indexes = [
            ("outlet_id", "created_at"),  # Outlet order history
            ("status",),                  # Kitchen/status filtering
            ("customer_id",),             # Customer history
            ("catering_status",),         # Catering bookings
        ]


class OrderItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order = fields.ForeignKeyField("models.Order", related_name="items", on_delete=fields.CASCADE)
    product_id = fields.UUIDField()
    variant_id = fields.UUIDField(null=True)
    quantity = fields.IntField()
    unit_price = fields.DecimalField(max_digits=12, decimal_places=2) # Price snapshot, never re-read
    discount_type = fields.CharEnumField(DiscountType, null=True)
    discount_value = fields.DecimalField(max_digits=12, decimal_places=2, null=True)
    discount_amount = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    subtotal = fields.DecimalField(max_digits=12, decimal_places=2)
    notes = fields.TextField(null=True)
    status = fields.CharEnumField(OrderItemStatus, default=OrderItemStatus.PENDING)
    station = fields.CharEnumField(KitchenStation, null=True)

    class Meta:
        table = "order_items"
        indexes = [
            ("order_id",),
            ("status",),
        ]


class OrderItemModifier(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order_item = fields.ForeignKeyField("models.OrderItem", related_name="modifiers", on_delete=fields.CASCADE)
    modifier_id = fields.UUIDField()
    quantity = fields.IntField(default=1)
    unit_price = fields.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        table = "order_item_modifiers"
        indexes = [
            ("order_item_id",),
        ]
