import pytest
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from uuid import uuid4

from app.models.catalog import KitchenStation, Modifier, Product, Variant
from app.services.errors import (
    ModifierMismatch,
    ModifierNotFound,
    ProductNotFound,
    VariantMismatch,
    VariantNotFound,
)
from app.services.master_data import MasterDataGateway
from app.testing.testing_mocks import create_mock_queryset

OUTLET_ID = uuid4()
PRODUCT_ID = uuid4()


@pytest.fixture
def product():
    return SimpleNamespace(id=PRODUCT_ID, base_price=Decimal("20000.00"), station=KitchenStation.GRILL)


@pytest.mark.asyncio
async def test_product_price_and_station(product):
    queryset = create_mock_queryset(first=product)
    with patch.object(Product, "filter", MagicMock(return_value=queryset)) as mock_filter:
        quote = await MasterDataGateway().resolve_item_pricing(OUTLET_ID, PRODUCT_ID)

    mock_filter.assert_called_once_with(id=PRODUCT_ID, outlet_id=OUTLET_ID, is_active=True)
    assert quote.unit_price == Decimal("20000.00")
    assert quote.station == KitchenStation.GRILL
    assert quote.variant_id is None


@pytest.mark.asyncio
async def test_missing_product():
    with patch.object(Product, "filter", MagicMock(return_value=create_mock_queryset(first=None))):
        with pytest.raises(ProductNotFound) as excinfo:
            await MasterDataGateway().resolve_item_pricing(OUTLET_ID, PRODUCT_ID)
    # The pipeline attaches the position, not the gateway
    assert excinfo.value.index is None


@pytest.mark.asyncio
async def test_variant_adjustment_is_added(product):
    variant_id = uuid4()
    variant = SimpleNamespace(
        id=variant_id,
        price_adjustment=Decimal("3500.00"),
        variant_group=SimpleNamespace(product_id=PRODUCT_ID),
    )
    with patch.object(Product, "filter", MagicMock(return_value=create_mock_queryset(first=product))):
        with patch.object(Variant, "filter", MagicMock(return_value=create_mock_queryset(first=variant))) as mock_filter:
            quote = await MasterDataGateway().resolve_item_pricing(OUTLET_ID, PRODUCT_ID, variant_id)

    mock_filter.assert_called_once_with(id=variant_id, is_active=True, variant_group__is_active=True)
    assert quote.unit_price == Decimal("23500.00")
    assert quote.variant_id == variant_id


@pytest.mark.asyncio
async def test_missing_variant(product):
    with patch.object(Product, "filter", MagicMock(return_value=create_mock_queryset(first=product))):
        with patch.object(Variant, "filter", MagicMock(return_value=create_mock_queryset(first=None))):
            with pytest.raises(VariantNotFound):
                await MasterDataGateway().resolve_item_pricing(OUTLET_ID, PRODUCT_ID, uuid4())


@pytest.mark.asyncio
async def test_variant_of_another_product(product):
    variant = SimpleNamespace(
        id=uuid4(),
        price_adjustment=Decimal("0.00"),
        variant_group=SimpleNamespace(product_id=uuid4()),
    )
    with patch.object(Product, "filter", MagicMock(return_value=create_mock_queryset(first=product))):
        with patch.object(Variant, "filter", MagicMock(return_value=create_mock_queryset(first=variant))):
            with pytest.raises(VariantMismatch):
                await MasterDataGateway().resolve_item_pricing(OUTLET_ID, PRODUCT_ID, variant.id)


@pytest.mark.asyncio
async def test_modifier_price():
    modifier = SimpleNamespace(
        id=uuid4(),
        price=Decimal("4000.00"),
        modifier_group=SimpleNamespace(product_id=PRODUCT_ID),
    )
    with patch.object(Modifier, "filter", MagicMock(return_value=create_mock_queryset(first=modifier))):
        quote = await MasterDataGateway().resolve_modifier_pricing(PRODUCT_ID, modifier.id)
    assert quote.unit_price == Decimal("4000.00")
    assert quote.modifier_id == modifier.id


@pytest.mark.asyncio
async def test_missing_modifier():
    with patch.object(Modifier, "filter", MagicMock(return_value=create_mock_queryset(first=None))):
        with pytest.raises(ModifierNotFound):
            await MasterDataGateway().resolve_modifier_pricing(PRODUCT_ID, uuid4())


@pytest.mark.asyncio
async def test_modifier_of_another_product():
    modifier = SimpleNamespace(
        id=uuid4(),
        price=Decimal("4000.00"),
        modifier_group=SimpleNamespace(product_id=uuid4()),
    )
    with patch.object(Modifier, "filter", MagicMock(return_value=create_mock_queryset(first=modifier))):
        with pytest.raises(ModifierMismatch):
            await MasterDataGateway().resolve_modifier_pricing(PRODUCT_ID, modifier.id)
