from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.models.catalog import KitchenStation, Modifier, Product, Variant
from app.services.errors import (
    ModifierMismatch,
    ModifierNotFound,
    ProductNotFound,
    VariantMismatch,
    VariantNotFound,
)


@dataclass(frozen=True)
class ItemPriceQuote:
    """Current price facts for an order line, read at request time."""
    product_id: UUID
    variant_id: Optional[UUID]
    unit_price: Decimal
    station: Optional[KitchenStation]


@dataclass(frozen=True)
class ModifierPriceQuote:
    modifier_id: UUID
    unit_price: Decimal


class MasterDataGateway:
    """
    Read-only access to product, variant and modifier facts.

    Missing or inactive rows are reported as the matching OrderError without a
    position; the validation pipeline attaches the item index. Storage errors
    are not caught here.
    """

    async def resolve_item_pricing(
        self, outlet_id: UUID, product_id: UUID, variant_id: Optional[UUID] = None
    ) -> ItemPriceQuote:
        product = await Product.filter(id=product_id, outlet_id=outlet_id, is_active=True).first()
        if not product:
            raise ProductNotFound()

        unit_price = product.base_price
        if variant_id is not None:
            variant = await (
                Variant.filter(id=variant_id, is_active=True, variant_group__is_active=True)
                .select_related("variant_group")
                .first()
            )
            if not variant:
                raise VariantNotFound()
            if variant.variant_group.product_id != product.id:
                raise VariantMismatch()
            # unit_price = base_price + variant adjustment
            unit_price = unit_price + variant.price_adjustment

        return ItemPriceQuote(
            product_id=product.id,
            variant_id=variant_id,
            unit_price=unit_price,
            station=product.station,
        )

    async def resolve_modifier_pricing(self, product_id: UUID, modifier_id: UUID) -> ModifierPriceQuote:
        modifier = await (
            Modifier.filter(id=modifier_id, is_active=True, modifier_group__is_active=True)
            .select_related("modifier_group")
            .first()
        )
        if not modifier:
            raise ModifierNotFound()
        if modifier.modifier_group.product_id != product_id:
            raise ModifierMismatch()
        return ModifierPriceQuote(modifier_id=modifier.id, unit_price=modifier.price)
