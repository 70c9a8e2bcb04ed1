"""Inventory controller: owner of the product collection and session UI state.

The controller is the single writer of the authoritative product collection.
Every successful mutation is followed by a wholesale refresh from the remote
service instead of a local patch, so the collection always mirrors what the
service returned last.

Usage:
    async with InventoryController(repository, confirm=ask_user) as controller:
        controller.set_search_query("desk")
        for product in controller.filtered_products:
            ...
        await controller.submit_form({"name": "Lamp", "price": "19.99", "quantity": "4"})
"""

import asyncio
import logging
from pathlib import Path
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
)

from .config import InventoryConfig
from .repository import (
    HttpProductRepository,
    ProductRepository,
    RepositoryError,
)
from .types import (
    Alert,
    AlertSeverity,
    InventoryStats,
    ModalState,
    Product,
    ProductData,
    ProductId,
    ViewState,
)
from .validation import (
    DraftLike,
    coerce_draft,
    validate,
)
from .views import (
    compute_stats,
    filter_products,
)


logger = logging.getLogger(__name__)

ConfirmFn = Callable[[Product], Awaitable[bool]]

FETCH_FAILED = "Failed to fetch products. Please try again."
CREATE_SUCCEEDED = "Product created successfully!"
CREATE_FAILED = "Failed to create product. Please try again."
UPDATE_SUCCEEDED = "Product updated successfully!"
UPDATE_FAILED = "Failed to update product. Please try again."
DELETE_SUCCEEDED = "Product deleted successfully!"
DELETE_FAILED = "Failed to delete product. Please try again."

DEFAULT_ALERT_TIMEOUT = 5.0


class InventoryController:
    """Keeps the product collection in sync with a ProductRepository.

    State is exposed through read-only properties; derived views
    (``filtered_products`` and ``stats``) are recomputed from the collection on
    every access. All methods must be called from the event loop that runs the
    controller.
    """

    def __init__(
        self,
        repository: ProductRepository,
        confirm: Optional[ConfirmFn] = None,
        alert_timeout: float = DEFAULT_ALERT_TIMEOUT,
    ):
        """Initialize the controller.

        Args:
            repository: Remote product CRUD client.
            confirm: Async callback asked before deleting a product. Deletions are
                declined when no callback is given here or per call.
            alert_timeout: Seconds before an alert clears itself.
        """
        self.repository = repository
        self.confirm = confirm
        self.alert_timeout = alert_timeout

        self._products: Tuple[Product, ...] = ()
        self._search_query = ""
        self._loading = True
        self._error: Optional[str] = None
        self._alert: Optional[Alert] = None
        self._alert_handle: Optional[asyncio.TimerHandle] = None
        self._modal_open = False
        self._editing_product: Optional[Product] = None

    @classmethod
    def from_settings(cls, config: InventoryConfig, confirm: Optional[ConfirmFn] = None) -> "InventoryController":
        """Create a controller talking HTTP to the service described by ``config``."""
        return cls(HttpProductRepository(config), confirm=confirm, alert_timeout=config.alert_timeout)

    @classmethod
    def from_config(cls, config_path: Union[str, Path], confirm: Optional[ConfirmFn] = None) -> "InventoryController":
        """Create a controller from a JSON configuration file."""
        return cls.from_settings(InventoryConfig.from_file(config_path), confirm=confirm)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any], confirm: Optional[ConfirmFn] = None) -> "InventoryController":
        """Create a controller from a configuration dictionary."""
        return cls.from_settings(InventoryConfig.from_dict(config_dict), confirm=confirm)

    @classmethod
    def from_env(cls, confirm: Optional[ConfirmFn] = None) -> "InventoryController":
        """Create a controller from ``INVENTORY_*`` environment variables."""
        return cls.from_settings(InventoryConfig.from_env(), confirm=confirm)

    async def __aenter__(self) -> "InventoryController":
        await self.refresh()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel the pending alert timer and release the repository."""
        self._cancel_alert_timer()
        await self.repository.close()

    # ==========================================================================
    # Read-only state
    # ==========================================================================

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    @property
    def filtered_products(self) -> List[Product]:
        return filter_products(self._products, self._search_query)

    @property
    def stats(self) -> InventoryStats:
        return compute_stats(self._products)

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def alert(self) -> Optional[Alert]:
        return self._alert

    @property
    def modal_open(self) -> bool:
        return self._modal_open

    @property
    def editing_product(self) -> Optional[Product]:
        return self._editing_product

    @property
    def modal_state(self) -> ModalState:
        if not self._modal_open:
            return ModalState.CLOSED
        if self._editing_product is None:
            return ModalState.CREATING
        return ModalState.EDITING

    @property
    def modal_title(self) -> str:
        return "Edit Product" if self._editing_product is not None else "Create New Product"

    @property
    def view_state(self) -> ViewState:
        """Which of loading / error / empty / list the product area should render."""
        if self._loading:
            return ViewState.LOADING
        if self._error is not None:
            return ViewState.ERROR
        if not self.filtered_products:
            return ViewState.EMPTY
        return ViewState.READY

    @property
    def empty_message(self) -> Tuple[str, str]:
        """Headline and hint for an empty product list."""
        if self._search_query:
            return "No products found", "Try adjusting your search query"
        return "No products yet", "Get started by adding your first product"

    # ==========================================================================
    # Synchronization with the repository
    # ==========================================================================

    async def refresh(self) -> None:
        """Replace the collection with the service's current product list.

        Failures are recorded in ``error`` and empty the collection; nothing is raised.
        """
        self._loading = True
        self._error = None
        try:
            products = await self.repository.list()
        except RepositoryError as e:
            logger.error("Error fetching products: %s", e)
            self._error = FETCH_FAILED
            self._products = ()
        else:
            self._products = tuple(products)
            logger.debug("Loaded %d products", len(self._products))
        finally:
            self._loading = False

    async def create_product(self, data: ProductData) -> bool:
        """Create a product remotely, then reload the collection.

        Returns:
            True if the service accepted the product.
        """
        try:
            created = await self.repository.create(data)
        except RepositoryError as e:
            logger.error("Error creating product: %s", e)
            self.show_alert(CREATE_FAILED, AlertSeverity.ERROR)
            return False

        logger.info("Created product %s", created.id if created is not None else "(no body returned)")
        self.show_alert(CREATE_SUCCEEDED)
        self.close_modal()
        await self.refresh()
        return True

    async def update_product(self, product_id: ProductId, data: ProductData) -> bool:
        """Update a product remotely, then reload the collection.

        Returns:
            True if the service accepted the update.
        """
        try:
            await self.repository.update(product_id, data)
        except RepositoryError as e:
            logger.error("Error updating product %s: %s", product_id, e)
            self.show_alert(UPDATE_FAILED, AlertSeverity.ERROR)
            return False

        logger.info("Updated product %s", product_id)
        self.show_alert(UPDATE_SUCCEEDED)
        self.close_modal()
        await self.refresh()
        return True

    async def delete_product(self, product: Product, confirm: Optional[ConfirmFn] = None) -> bool:
        """Delete a product after the user confirms it.

        Args:
            product: Product to delete.
            confirm: Confirmation callback overriding the controller's one.

        Returns:
            True if the product was deleted. False when the user declined or the
            service rejected the call. A confirmation callback that raises counts
            as declined.
        """
        ask = confirm or self.confirm
        if ask is None:
            logger.warning("No delete confirmation configured; not deleting product %s", product.id)
            return False
        try:
            confirmed = await ask(product)
        except Exception as e:
            logger.error("Delete confirmation for product %s failed: %s", product.id, e)
            return False
        if not confirmed:
            logger.debug("Deletion of product %s declined", product.id)
            return False

        try:
            await self.repository.delete(product.id)
        except RepositoryError as e:
            logger.error("Error deleting product %s: %s", product.id, e)
            self.show_alert(DELETE_FAILED, AlertSeverity.ERROR)
            return False

        logger.info("Deleted product %s", product.id)
        self.show_alert(DELETE_SUCCEEDED)
        await self.refresh()
        return True

    async def submit_form(self, draft: DraftLike) -> Dict[str, str]:
        """Validate form values and create or update depending on the modal state.

        Returns:
            The validation errors. When empty, the draft was sent to the service;
            check ``alert`` for the outcome.
        """
        errors = validate(draft)
        if errors:
            return errors

        data = coerce_draft(draft)
        if self._editing_product is not None:
            await self.update_product(self._editing_product.id, data)
        else:
            await self.create_product(data)
        return {}

    # ==========================================================================
    # Session UI state transitions
    # ==========================================================================

    def set_search_query(self, query: str) -> None:
        self._search_query = query

    def open_create_modal(self) -> None:
        self._editing_product = None
        self._modal_open = True

    def open_edit_modal(self, product: Product) -> None:
        self._editing_product = product
        self._modal_open = True

    def close_modal(self) -> None:
        self._modal_open = False
        self._editing_product = None

    def show_alert(self, message: str, severity: AlertSeverity = AlertSeverity.SUCCESS) -> Alert:
        """Replace the current alert and schedule it to expire.

        Must be called with a running event loop.
        """
        self._cancel_alert_timer()
        alert = Alert(message=message, severity=severity)
        self._alert = alert
        self._alert_handle = asyncio.get_running_loop().call_later(self.alert_timeout, self._expire_alert, alert)
        return alert

    def dismiss_alert(self) -> None:
        self._cancel_alert_timer()
        self._alert = None

    def _expire_alert(self, alert: Alert) -> None:
        # Only clear the alert this timer was scheduled for
        if self._alert is alert:
            self._alert = None
        self._alert_handle = None

    def _cancel_alert_timer(self) -> None:
        if self._alert_handle is not None:
            self._alert_handle.cancel()
            self._alert_handle = None
