"""In-memory product repository used by the console examples.

It plays the role of the remote CRUD service: it assigns ids and creation
timestamps, keeps insertion order, and can persist its state to a pickle file
between runs. Failures can be injected per operation to exercise the
controller's error handling.
"""

import asyncio
import pickle
from datetime import (
    datetime,
    timezone,
)
from pathlib import Path
from typing import (
    Dict,
    Iterable,
    List,
    Optional,
    Set,
)

from inventory_sync import (
    Product,
    ProductData,
    RepositoryError,
)
from inventory_sync.types import ProductId


class MemoryProductRepository:
    """ProductRepository keeping products in a dictionary ordered by creation.

    Args:
        database_file: Pickle file to load from (if it exists) and save to on
            ``close()``. None disables persistence.
        latency: Seconds each call waits before answering, to mimic the network.
    """

    def __init__(self, database_file: Optional[str] = None, latency: float = 0.0) -> None:
        self._database_file = database_file
        self.latency = latency
        self.fail_operations: Set[str] = set()

        if database_file is not None and Path(database_file).exists():
            self._load_from_file(database_file)
        else:
            self._products: Dict[int, Product] = {}  # product_id -> Product
            self._next_id = 1

    def _load_from_file(self, filepath: str) -> None:
        with open(filepath, "rb") as f:
            state = pickle.load(f)
        self._products = state["products"]
        self._next_id = state["next_id"]

    def _save_to_file(self, filepath: str) -> None:
        state = {
            "products": self._products,
            "next_id": self._next_id,
        }
        with open(filepath, "wb") as f:
            pickle.dump(state, f)

    async def _enter(self, operation: str) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if operation in self.fail_operations:
            raise RepositoryError(f"Simulated failure of '{operation}'", status_code=503)

    def _get(self, product_id: ProductId) -> Product:
        try:
            return self._products[int(product_id)]
        except (KeyError, ValueError) as e:
            raise RepositoryError(f"Product with ID '{product_id}' does not exist", status_code=404) from e

    def add_products(self, products: Iterable[ProductData]) -> List[Product]:
        """Insert products synchronously (used for seeding)."""
        return [self._insert(data) for data in products]

    def _insert(self, data: ProductData) -> Product:
        product = Product(
            id=self._next_id,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        self._products[product.id] = product  # type: ignore[index]
        self._next_id += 1
        return product

    # ==============================================================================
    # ProductRepository protocol
    # ==============================================================================

    async def list(self) -> List[Product]:
        await self._enter("list")
        return list(self._products.values())

    async def create(self, data: ProductData) -> Product:
        await self._enter("create")
        return self._insert(data)

    async def update(self, product_id: ProductId, data: ProductData) -> Product:
        await self._enter("update")
        current = self._get(product_id)
        # id and created_at are immutable
        updated = current.model_copy(update=data.model_dump())
        self._products[int(product_id)] = updated
        return updated

    async def delete(self, product_id: ProductId) -> None:
        await self._enter("delete")
        self._get(product_id)
        del self._products[int(product_id)]

    async def close(self) -> None:
        if self._database_file is not None:
            self._save_to_file(self._database_file)
