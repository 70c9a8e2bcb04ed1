"""inventory-sync: client-side product inventory state and derived views."""

from .config import InventoryConfig
from .controller import InventoryController
from .repository import (
    HttpProductRepository,
    ProductRepository,
    RepositoryError,
)
from .sync_controller import SyncInventoryController
from .types import (
    Alert,
    AlertSeverity,
    InventoryStats,
    ModalState,
    Product,
    ProductData,
    ProductDraft,
    ViewState,
)
from .validation import (
    coerce_draft,
    draft_from_product,
    validate,
)
from .views import (
    compute_stats,
    filter_products,
    format_date,
    format_price,
)


__all__ = [
    "Alert",
    "AlertSeverity",
    "HttpProductRepository",
    "InventoryConfig",
    "InventoryController",
    "InventoryStats",
    "ModalState",
    "Product",
    "ProductData",
    "ProductDraft",
    "ProductRepository",
    "RepositoryError",
    "SyncInventoryController",
    "ViewState",
    "coerce_draft",
    "compute_stats",
    "draft_from_product",
    "filter_products",
    "format_date",
    "format_price",
    "validate",
]
