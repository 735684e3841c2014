"""Client-fixable order creation errors.

Raised by the validation pipeline and the master-data gateway. The API layer
maps every ``OrderError`` to a 400 response; anything else escaping the order
service is an internal failure.
"""
from typing import Optional


class OrderError(Exception):
    """Base class for errors the caller can fix by correcting the request."""

    code = "order_error"
    default_message = "invalid order request"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        index: Optional[int] = None,
        modifier_index: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.index = index
        self.modifier_index = modifier_index
        super().__init__(self.message)

    def at(self, index: int, modifier_index: Optional[int] = None) -> "OrderError":
        """Attaches the position of the offending item (and modifier)."""
        self.index = index
        self.modifier_index = modifier_index
        return self

    @property
    def location(self) -> Optional[str]:
        if self.index is None:
            return None
        if self.modifier_index is None:
            return f"items[{self.index}]"
        return f"items[{self.index}].modifiers[{self.modifier_index}]"

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


class OrderShapeError(OrderError):
    """A required field is missing or a value has the wrong shape."""
    code = "invalid_request"


class InvalidOrderType(OrderError):
    code = "invalid_order_type"
    default_message = "invalid order_type"


class CateringDateRequired(OrderError):
    code = "catering_date_required"
    default_message = "catering_date is required for CATERING orders"


class InvalidDiscount(OrderError):
    code = "invalid_discount"
    default_message = "invalid discount_type"


class ProductNotFound(OrderError):
    code = "product_not_found"
    default_message = "product not found in outlet"


class VariantNotFound(OrderError):
    code = "variant_not_found"
    default_message = "variant not found"


class VariantMismatch(OrderError):
    code = "variant_mismatch"
    default_message = "variant does not belong to product"


class ModifierNotFound(OrderError):
    code = "modifier_not_found"
    default_message = "modifier not found"


class ModifierMismatch(OrderError):
    code = "modifier_mismatch"
    default_message = "modifier does not belong to product"
