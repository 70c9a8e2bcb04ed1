"""
Synchronous wrapper for InventoryController with background event loop.

This module provides SyncInventoryController, a context manager that wraps
the async InventoryController in a synchronous interface using a background
thread with a persistent event loop. Every call, including pure state
transitions, is scheduled onto that loop so the controller is only ever
mutated from a single execution context.
"""

import asyncio
import atexit
import logging
import threading
from concurrent.futures import (
    Future,
    TimeoutError as FuturesTimeoutError,
)
from pathlib import Path
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Literal,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .config import InventoryConfig
from .controller import (
    DEFAULT_ALERT_TIMEOUT,
    InventoryController,
)
from .repository import (
    HttpProductRepository,
    ProductRepository,
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
from .validation import DraftLike


logger = logging.getLogger(__name__)

T = TypeVar("T")
SyncConfirmFn = Callable[[Product], bool]


class SyncInventoryController:
    """Runs an InventoryController in a background thread with a persistent event loop.

    Usage:
        # Context manager (recommended)
        with SyncInventoryController.from_config("inventory.json", confirm=ask) as inventory:
            inventory.set_search_query("chair")
            for product in inventory.filtered_products:
                print(product.name)

        # Manual lifecycle management
        inventory = SyncInventoryController(repository=my_repository)
        inventory.refresh()
        # ... use inventory ...
        inventory.shutdown()

    Thread Safety:
        All public methods schedule their work on the background event loop with
        asyncio.run_coroutine_threadsafe() and wait for the result.
    """

    def __init__(
        self,
        repository: Optional[ProductRepository] = None,
        config: Optional[InventoryConfig] = None,
        confirm: Optional[SyncConfirmFn] = None,
        timeout: Optional[float] = None,
        alert_timeout: Optional[float] = None,
    ):
        """Initialize SyncInventoryController.

        Starts the background thread and performs the initial product load
        during construction. Registers a cleanup handler for program exit.

        Args:
            repository: Product repository to synchronize with.
            config: Settings used to build an HttpProductRepository (alternative to repository).
            confirm: Blocking callback asked before a product is deleted. It runs in
                a worker thread so the event loop keeps serving alert timers.
            timeout: Maximum seconds to wait for each operation. None means wait forever.
            alert_timeout: Seconds before an alert expires. Defaults to the config value,
                or 5 seconds without config.

        Raises:
            ValueError: If neither or both repository and config are provided.
            RuntimeError: If the controller does not start within 30 seconds.
        """
        if (repository is None) == (config is None):
            raise ValueError("Exactly one of repository or config must be provided")

        self.config = config
        self.repository: ProductRepository = repository or HttpProductRepository(config)  # type: ignore[arg-type]
        self.confirm = confirm
        self.timeout = timeout
        if alert_timeout is None:
            alert_timeout = config.alert_timeout if config is not None else DEFAULT_ALERT_TIMEOUT
        self.alert_timeout = alert_timeout
        self.controller: Optional[InventoryController] = None
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.thread: Optional[threading.Thread] = None
        self._shutdown = False
        self._init_complete = threading.Event()
        self._stop_requested = asyncio.Event()
        self._owner_future: Optional["Future[None]"] = None

        self._start_loop_thread()

        self._owner_future = asyncio.run_coroutine_threadsafe(self._own_controller(), self.loop)  # type: ignore[arg-type]

        if not self._init_complete.wait(timeout=30):
            raise RuntimeError("Inventory controller initialization timed out after 30 seconds")

        # The owning task only finishes early when startup failed
        if self._owner_future.done():
            exc = self._owner_future.exception()
            if exc:
                raise exc

        atexit.register(self.shutdown)

    @classmethod
    def from_config(
        cls, config_path: Union[str, Path], confirm: Optional[SyncConfirmFn] = None
    ) -> "SyncInventoryController":
        """Create a controller from a JSON configuration file.

        Examples:
            >>> inventory = SyncInventoryController.from_config("inventory.json")
        """
        return cls(config=InventoryConfig.from_file(config_path), confirm=confirm)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any], confirm: Optional[SyncConfirmFn] = None) -> "SyncInventoryController":
        """Create a controller from a configuration dictionary.

        Examples:
            >>> inventory = SyncInventoryController.from_dict({"api_base_url": "http://localhost:8000/api"})
        """
        return cls(config=InventoryConfig.from_dict(config_dict), confirm=confirm)

    def _start_loop_thread(self) -> None:
        """Start the thread that runs the controller's event loop and wait until the loop exists."""
        loop_ready = threading.Event()

        def run() -> None:
            self.loop = asyncio.new_event_loop()
            asyncio.set_event_loop(self.loop)
            loop_ready.set()
            self.loop.run_forever()

        self.thread = threading.Thread(target=run, daemon=True, name="InventoryControllerThread")
        self.thread.start()
        loop_ready.wait()

    async def _confirm_async(self, product: Product) -> bool:
        if self.confirm is None:
            return False
        return await asyncio.to_thread(self.confirm, product)

    async def _own_controller(self) -> None:
        """Create the controller on the background loop and keep it there until shutdown.

        Alert expiry timers are scheduled on the loop that raised the alert, and
        the controller state must only change on that loop. This task therefore
        builds the controller, performs the initial load, parks on the stop
        event, and closes the controller (cancelling any pending alert timer and
        the repository session) before the loop is stopped.
        """
        self.controller = InventoryController(
            self.repository, confirm=self._confirm_async, alert_timeout=self.alert_timeout
        )
        try:
            await self.controller.__aenter__()
            self._init_complete.set()
            await self._stop_requested.wait()
        except Exception as e:
            logger.error("Inventory controller failed: %s", e)
            raise
        finally:
            self._init_complete.set()
            try:
                await self.controller.aclose()
            except Exception as e:
                logger.error("Error closing inventory controller: %s", e)

    def shutdown(self) -> None:
        """Close the controller and stop the background loop.

        Safe to call multiple times. Waits up to 10 seconds for the controller to close.
        """
        if self.loop is None or self._shutdown:
            return
        logger.debug("Shutting down SyncInventoryController...")
        self._shutdown = True

        try:
            self.loop.call_soon_threadsafe(self._stop_requested.set)
        except RuntimeError:
            # Loop already closed during interpreter shutdown
            return

        # Called from a loop callback: waiting on the owning task would deadlock
        if threading.current_thread() is self.thread:
            self.loop.call_soon(self.loop.stop)
            return

        if self._owner_future is not None:
            try:
                self._owner_future.result(timeout=10)
                logger.debug("Inventory controller closed")
            except Exception as e:
                logger.warning("Error during inventory controller shutdown: %s", e)

        try:
            self.loop.call_soon_threadsafe(self.loop.stop)
        except RuntimeError:
            return
        if self.thread is not None:
            self.thread.join(timeout=5)

    def __enter__(self) -> "SyncInventoryController":
        """Enter context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> Literal[False]:
        """Exit context manager and cleanup."""
        self.shutdown()
        return False  # Don't suppress exceptions

    def _run(self, coro: Awaitable[T], default: T, description: str) -> T:
        """Run a coroutine on the background loop and wait for it.

        Returns ``default`` if the controller is not running or the call times out.
        """
        if self.loop is None or self.controller is None:
            logger.error("Cannot %s: inventory controller not initialized", description)
            if asyncio.iscoroutine(coro):
                coro.close()
            return default

        future = asyncio.run_coroutine_threadsafe(coro, self.loop)  # type: ignore[arg-type]
        try:
            return future.result(timeout=self.timeout)
        except FuturesTimeoutError:
            logger.error("%s timed out after %s seconds", description.capitalize(), self.timeout)
            return default

    def _call(self, fn: Callable[..., T], *args: Any, default: T, description: Optional[str] = None) -> T:
        """Run a synchronous controller method on the background loop."""

        async def _invoke() -> T:
            return fn(*args)

        return self._run(_invoke(), default, description or fn.__name__.replace("_", " "))

    # ==========================================================================
    # Operations
    # ==========================================================================

    def refresh(self) -> None:
        """Reload products from the service. Failures end up in ``error``."""
        if self.controller is None:
            logger.error("Cannot refresh: inventory controller not initialized")
            return
        self._run(self.controller.refresh(), None, "refresh products")

    def create_product(self, data: ProductData) -> bool:
        if self.controller is None:
            return False
        return self._run(self.controller.create_product(data), False, "create product")

    def update_product(self, product_id: ProductId, data: ProductData) -> bool:
        if self.controller is None:
            return False
        return self._run(self.controller.update_product(product_id, data), False, "update product")

    def delete_product(self, product: Product) -> bool:
        """Ask for confirmation and delete the product.

        Returns:
            True if the product was deleted.
        """
        if self.controller is None:
            return False
        return self._run(self.controller.delete_product(product), False, "delete product")

    def submit_form(self, draft: DraftLike) -> Dict[str, str]:
        """Validate and submit form values. Returns the validation errors."""
        if self.controller is None:
            return {}
        return self._run(self.controller.submit_form(draft), {}, "submit form")

    def set_search_query(self, query: str) -> None:
        if self.controller is not None:
            self._call(self.controller.set_search_query, query, default=None)

    def open_create_modal(self) -> None:
        if self.controller is not None:
            self._call(self.controller.open_create_modal, default=None)

    def open_edit_modal(self, product: Product) -> None:
        if self.controller is not None:
            self._call(self.controller.open_edit_modal, product, default=None)

    def close_modal(self) -> None:
        if self.controller is not None:
            self._call(self.controller.close_modal, default=None)

    def show_alert(self, message: str, severity: AlertSeverity = AlertSeverity.SUCCESS) -> Optional[Alert]:
        if self.controller is None:
            return None
        return self._call(self.controller.show_alert, message, severity, default=None)

    def dismiss_alert(self) -> None:
        if self.controller is not None:
            self._call(self.controller.dismiss_alert, default=None)

    # ==========================================================================
    # State snapshots
    # ==========================================================================

    def _read(self, name: str, default: T) -> T:
        if self.controller is None:
            return default
        controller = self.controller
        return self._call(lambda: getattr(controller, name), default=default, description=f"read {name}")

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._read("products", ())

    @property
    def filtered_products(self) -> List[Product]:
        return self._read("filtered_products", [])

    @property
    def stats(self) -> InventoryStats:
        return self._read("stats", InventoryStats())

    @property
    def search_query(self) -> str:
        return self._read("search_query", "")

    @property
    def loading(self) -> bool:
        return self._read("loading", False)

    @property
    def error(self) -> Optional[str]:
        return self._read("error", None)

    @property
    def alert(self) -> Optional[Alert]:
        return self._read("alert", None)

    @property
    def modal_open(self) -> bool:
        return self._read("modal_open", False)

    @property
    def editing_product(self) -> Optional[Product]:
        return self._read("editing_product", None)

    @property
    def modal_state(self) -> ModalState:
        return self._read("modal_state", ModalState.CLOSED)

    @property
    def modal_title(self) -> str:
        return self._read("modal_title", "Create New Product")

    @property
    def view_state(self) -> ViewState:
        return self._read("view_state", ViewState.ERROR)

    @property
    def empty_message(self) -> Tuple[str, str]:
        return self._read("empty_message", ("No products yet", "Get started by adding your first product"))
