from enum import Enum
from tortoise import fields, models
import uuid


class KitchenStation(str, Enum):
    GRILL = "GRILL"
    BEVERAGE = "BEVERAGE"
    RICE = "RICE"
    DESSERT = "DESSERT"


class Outlet(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    is_active = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "outlets"


class Product(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    outlet = fields.ForeignKeyField("models.Outlet", related_name="products")
    name = fields.CharField(max_length=255)
    base_price = fields.DecimalField(max_digits=12, decimal_places=2)
    station = fields.CharEnumField(KitchenStation, null=True) # Copied onto order items for kitchen routing
    is_active = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "products"
        indexes = [
            ("outlet_id", "is_active"),  # Outlet's active menu
        ]


class VariantGroup(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    product = fields.ForeignKeyField("models.Product", related_name="variant_groups")
    name = fields.CharField(max_length=100)
    is_required = fields.BooleanField(default=True)
    is_active = fields.BooleanField(default=True)
    sort_order = fields.IntField(default=0)

    class Meta:
        table = "variant_groups"
        indexes = [
            ("product_id",),
        ]


class Variant(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    variant_group = fields.ForeignKeyField("models.VariantGroup", related_name="variants")
    name = fields.CharField(max_length=100)
    price_adjustment = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    is_active = fields.BooleanField(default=True)
    sort_order = fields.IntField(default=0)

    class Meta:
        table = "variants"
        indexes = [
            ("variant_group_id",),
        ]


class ModifierGroup(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    product = fields.ForeignKeyField("models.Product", related_name="modifier_groups")
    name = fields.CharField(max_length=100)
    min_select = fields.IntField(default=0)
    max_select = fields.IntField(null=True)
    is_active = fields.BooleanField(default=True)
    sort_order = fields.IntField(default=0)

    class Meta:
        table = "modifier_groups"
        indexes = [
            ("product_id",),
        ]


class Modifier(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    modifier_group = fields.ForeignKeyField("models.ModifierGroup", related_name="modifiers")
    name = fields.CharField(max_length=100)
    price = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    is_active = fields.BooleanField(default=True)
    sort_order = fields.IntField(default=0)

    class Meta:
        table = "modifiers"
        indexes = [
            ("modifier_group_id",),
        ]
