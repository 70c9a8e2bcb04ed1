"""Common console helpers for the inventory clients.

This module renders controller state as text and collects form input and
delete confirmations from the user. Both the async and the sync console
clients use it.
"""

from typing import (
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
)

from inventory_sync import (
    Alert,
    AlertSeverity,
    Product,
    ProductDraft,
    ViewState,
    draft_from_product,
    format_date,
    format_price,
)


FORM_FIELDS: List[Tuple[str, str]] = [
    ("name", "Product Name *"),
    ("description", "Description"),
    ("price", "Price ($) *"),
    ("quantity", "Quantity *"),
    ("category", "Category"),
]


def render_product_card(product: Product) -> str:
    """Render a product as a small text card."""
    lines = [f"#{product.id} {product.name}"]
    if product.category:
        lines[0] += f"  [{product.category}]"
    lines.append(f"    {product.description or 'No description available'}")
    lines.append(f"    Price: {format_price(product.price)}   In Stock: {product.quantity}")
    lines.append(f"    Added {format_date(product.created_at)}")
    return "\n".join(lines)


def render_alert(alert: Optional[Alert]) -> str:
    if alert is None:
        return ""
    marker = "[OK]" if alert.severity == AlertSeverity.SUCCESS else "[ERROR]"
    return f"{marker} {alert.message}"


def render_product_area(
    view_state: ViewState,
    products: Sequence[Product],
    error: Optional[str],
    empty_message: Tuple[str, str],
) -> str:
    """Render the product list area for the current view state."""
    if view_state == ViewState.LOADING:
        return "Loading products..."
    if view_state == ViewState.ERROR:
        return f"Oops! Something went wrong\n{error}\nType 'refresh' to try again."
    if view_state == ViewState.EMPTY:
        headline, hint = empty_message
        return f"{headline}\n{hint}"
    return "\n\n".join(render_product_card(product) for product in products)


def prompt_product_form(product: Optional[Product]) -> ProductDraft:
    """Ask the user for product fields, pre-filled from ``product`` when editing."""
    return prompt_draft(draft_from_product(product))


def prompt_draft(current: ProductDraft, errors: Optional[Dict[str, str]] = None) -> ProductDraft:
    """Ask the user for product fields.

    Pressing Enter keeps the current value.

    Args:
        current: Values shown as defaults.
        errors: Validation errors from the previous attempt, shown before their field.

    Returns:
        ProductDraft with the raw values typed by the user.
    """
    values = current.model_dump()
    for field, label in FORM_FIELDS:
        if errors and field in errors:
            print(f"  ! {errors[field]}")
        shown = values.get(field) or ""
        user_input = input(f"{label} [{shown}]: ").strip()
        if user_input:
            values[field] = user_input
    return ProductDraft.model_validate(values)


def confirm_delete(product: Product) -> bool:
    """Ask the user a yes/no question before deleting a product."""
    answer = input(f'Are you sure you want to delete "{product.name}"? [y/N]: ').strip().lower()
    return answer in ("y", "yes")


def find_product(products: Sequence[Product], product_id: str) -> Optional[Product]:
    """Find a product by its id as typed by the user."""
    for product in products:
        if str(product.id) == product_id.strip():
            return product
    return None
