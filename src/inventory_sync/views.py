"""Derived views over the product collection.

Both views are pure functions of the collection: they are recomputed on every
read and never mutated in place.
"""

from datetime import datetime
from decimal import (
    ROUND_HALF_UP,
    Decimal,
)
from typing import (
    List,
    Optional,
    Sequence,
    Union,
)

from .types import (
    InventoryStats,
    Product,
)


def _matches(product: Product, query: str) -> bool:
    if query in product.name.lower():
        return True
    if product.category and query in product.category.lower():
        return True
    return bool(product.description) and query in product.description.lower()  # type: ignore[union-attr]


def filter_products(products: Sequence[Product], query: str) -> List[Product]:
    """Select products whose name, category or description contains the query.

    Matching is case-insensitive. A blank query selects every product. The
    relative order of the collection is preserved.
    """
    if not query or not query.strip():
        return list(products)
    needle = query.lower()
    return [product for product in products if _matches(product, needle)]


def compute_stats(products: Sequence[Product]) -> InventoryStats:
    """Aggregate count, value, stock and distinct category count."""
    return InventoryStats(
        total_products=len(products),
        total_value=sum((product.price * product.quantity for product in products), Decimal("0")),
        total_stock=sum(product.quantity for product in products),
        categories=len({product.category for product in products if product.category}),
    )


def format_price(value: Union[Decimal, float, int]) -> str:
    """Format an amount as US dollars, e.g. ``$1,234.50``."""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: Optional[datetime]) -> str:
    """Format a timestamp as ``Jan 5, 2024``."""
    if value is None:
        return "Unknown"
    return f"{value:%b} {value.day}, {value.year}"
