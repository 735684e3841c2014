# app/models/__init__.py
from .catalog import KitchenStation, Outlet, Product, VariantGroup, Variant, ModifierGroup, Modifier
from .order import (
    CateringStatus,
    DiscountType,
    Order,
    OrderItem,
    OrderItemModifier,
    OrderItemStatus,
    OrderStatus,
    OrderType,
)
from .sequence import OrderNumberSequence

# Export all models
__all__ = [
    "CateringStatus",
    "DiscountType",
    "KitchenStation",
    "Modifier",
    "ModifierGroup",
    "Order",
    "OrderItem",
    "OrderItemModifier",
    "OrderItemStatus",
    "OrderNumberSequence",
    "OrderStatus",
    "OrderType",
    "Outlet",
    "Product",
    "Variant",
    "VariantGroup",
]
