"""Product repository client: the contract to the remote CRUD service.

``ProductRepository`` is the interface the controller depends on.
``HttpProductRepository`` implements it over HTTP with requests, running the
blocking calls in a worker thread so the event loop is never blocked.
"""

import asyncio
import logging
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Protocol,
    runtime_checkable,
)

import requests
from pydantic import ValidationError

from .config import InventoryConfig
from .types import (
    Product,
    ProductData,
    ProductId,
)


logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when a call to the product service fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@runtime_checkable
class ProductRepository(Protocol):
    """Async CRUD contract for products. Every method may raise RepositoryError."""

    async def list(self) -> List[Product]: ...

    async def create(self, data: ProductData) -> Optional[Product]: ...

    async def update(self, product_id: ProductId, data: ProductData) -> Optional[Product]: ...

    async def delete(self, product_id: ProductId) -> None: ...

    async def close(self) -> None: ...


class HttpProductRepository:
    """ProductRepository backed by a JSON REST API.

    Endpoints (relative to ``config.api_base_url``):
        GET    /products
        POST   /products
        PUT    /products/{id}
        DELETE /products/{id}
    """

    def __init__(self, config: InventoryConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        if config.api_token:
            self._session.headers["Authorization"] = f"Bearer {config.api_token}"

    @property
    def products_url(self) -> str:
        return f"{self.config.api_base_url}/products"

    def _product_url(self, product_id: ProductId) -> str:
        return f"{self.products_url}/{product_id}"

    def _request(self, method: str, url: str, json_body: Optional[Dict[str, Any]] = None) -> Any:
        """Perform a blocking request and return the decoded JSON body (None when empty).

        A non-JSON body fails reads. For writes the status code already reports
        success, so the body is dropped with a warning.
        """
        try:
            resp = self._session.request(method, url, json=json_body, timeout=self.config.request_timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise RepositoryError(f"{method} {url} failed with status {status}", status_code=status) from e
        except requests.RequestException as e:
            raise RepositoryError(f"{method} {url} failed: {e}") from e

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            if method != "GET":
                logger.warning("%s %s returned a non-JSON body; ignoring it", method, url)
                return None
            raise RepositoryError(f"{method} {url} returned a non-JSON body", status_code=resp.status_code) from e

    @staticmethod
    def _parse_product(payload: Any) -> Product:
        try:
            return Product.model_validate(payload)
        except ValidationError as e:
            raise RepositoryError(f"Malformed product in response: {e}") from e

    async def list(self) -> List[Product]:
        payload = await asyncio.to_thread(self._request, "GET", self.products_url)
        if not isinstance(payload, list):
            raise RepositoryError("Expected a list of products in response")
        return [self._parse_product(item) for item in payload]

    def _parse_written_product(self, payload: Any, method: str, url: str) -> Optional[Product]:
        """Parse the product echoed by a create/update; the write stands even without one."""
        if payload is None:
            return None
        try:
            return Product.model_validate(payload)
        except ValidationError as e:
            logger.warning("%s %s succeeded but returned no usable product: %s", method, url, e)
            return None

    async def create(self, data: ProductData) -> Optional[Product]:
        payload = await asyncio.to_thread(self._request, "POST", self.products_url, data.to_payload())
        return self._parse_written_product(payload, "POST", self.products_url)

    async def update(self, product_id: ProductId, data: ProductData) -> Optional[Product]:
        url = self._product_url(product_id)
        payload = await asyncio.to_thread(self._request, "PUT", url, data.to_payload())
        return self._parse_written_product(payload, "PUT", url)

    async def delete(self, product_id: ProductId) -> None:
        await asyncio.to_thread(self._request, "DELETE", self._product_url(product_id))

    async def close(self) -> None:
        logger.debug("Closing HTTP session for %s", self.config.api_base_url)
        self._session.close()
