"""Validation of product drafts before submission."""

from decimal import (
    ROUND_DOWN,
    Decimal,
    InvalidOperation,
)
from typing import (
    Any,
    Dict,
    Mapping,
    Optional,
    Union,
)

from .types import (
    Product,
    ProductData,
    ProductDraft,
)


NAME_REQUIRED = "Product name is required"
PRICE_INVALID = "Price must be a positive number"
QUANTITY_INVALID = "Quantity must be a positive number"

MAX_QUANTITY_DIGITS = 18

DraftLike = Union[ProductDraft, Mapping[str, Any]]


def _as_draft(draft: DraftLike) -> ProductDraft:
    if isinstance(draft, ProductDraft):
        return draft
    return ProductDraft.model_validate({key: value for key, value in draft.items() if value is not None})


def _parse_price(value: Any) -> Optional[Decimal]:
    """Return the price as a Decimal, or None if it is missing or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        price = Decimal(text)
    except InvalidOperation:
        return None
    if not price.is_finite():
        return None
    return price


def _parse_quantity(value: Any) -> Optional[Decimal]:
    """Return the quantity as a finite Decimal, or None if it is missing or not a usable number.

    Fractional values are accepted here and truncated by ``coerce_draft``.
    """
    if value is None or isinstance(value, bool):
        return None
    quantity = Decimal(value) if isinstance(value, int) else _parse_price(value)
    # Converting a huge exponent to int would build a number with that many digits
    if quantity is None or quantity.adjusted() > MAX_QUANTITY_DIGITS:
        return None
    return quantity


def validate(draft: DraftLike) -> Dict[str, str]:
    """Validate a product draft.

    Args:
        draft: Form values as a ProductDraft or a mapping of field name to raw value.

    Returns:
        Mapping of field name to error message. Empty when the draft may be submitted.
    """
    form = _as_draft(draft)
    errors: Dict[str, str] = {}

    if not form.name.strip():
        errors["name"] = NAME_REQUIRED

    price = _parse_price(form.price)
    if price is None or price < 0:
        errors["price"] = PRICE_INVALID

    quantity = _parse_quantity(form.quantity)
    if quantity is None or quantity < 0:
        errors["quantity"] = QUANTITY_INVALID

    return errors


def coerce_draft(draft: DraftLike) -> ProductData:
    """Convert a valid draft into the data handed to the controller.

    Raises:
        ValueError: If the draft does not pass validation.
    """
    form = _as_draft(draft)
    errors = validate(form)
    if errors:
        raise ValueError(f"Cannot coerce invalid draft: {errors}")

    return ProductData(
        name=form.name,
        description=form.description or None,
        price=_parse_price(form.price),  # type: ignore[arg-type]
        quantity=int(_parse_quantity(form.quantity).to_integral_value(rounding=ROUND_DOWN)),  # type: ignore[union-attr]
        category=form.category or None,
    )


def draft_from_product(product: Optional[Product]) -> ProductDraft:
    """Pre-fill form values from an existing product, or blank values for a new one."""
    if product is None:
        return ProductDraft()
    return ProductDraft(
        name=product.name,
        description=product.description or "",
        price=str(product.price),
        quantity=str(product.quantity),
        category=product.category or "",
    )
