"""Shared fixtures for inventory-sync tests."""

import json
from datetime import (
    datetime,
    timezone,
)
from decimal import Decimal
from pathlib import Path
from typing import (
    Any,
    Dict,
    List,
)
from unittest.mock import AsyncMock

import pytest

from inventory_sync import (
    Product,
    ProductData,
)


@pytest.fixture
def sample_products() -> List[Product]:
    """Three products across two categories, one without category or description."""
    created = datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)
    return [
        Product(
            id=1,
            name="Office Chair",
            description="Ergonomic mesh chair",
            price=Decimal("189.99"),
            quantity=12,
            category="Furniture",
            created_at=created,
        ),
        Product(
            id=2,
            name="Wireless Keyboard",
            description="Bluetooth, low profile",
            price=Decimal("59.90"),
            quantity=40,
            category="Electronics",
            created_at=created,
        ),
        Product(
            id=3,
            name="Desk Lamp",
            description=None,
            price=Decimal("24.99"),
            quantity=0,
            category=None,
            created_at=created,
        ),
    ]


@pytest.fixture
def product_data() -> ProductData:
    return ProductData(name="Standing Desk", description="Electric", price=Decimal("449.00"), quantity=5, category="Furniture")


@pytest.fixture
def mock_repository(sample_products: List[Product]) -> AsyncMock:
    """Repository double whose list() returns the sample products."""
    repository = AsyncMock()
    repository.list = AsyncMock(return_value=list(sample_products))
    repository.create = AsyncMock()
    repository.update = AsyncMock()
    repository.delete = AsyncMock(return_value=None)
    repository.close = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def sample_config_dict() -> Dict[str, Any]:
    return {
        "api_base_url": "http://inventory.test/api/",
        "api_token": "secret-token",
        "request_timeout": 3,
        "alert_timeout": 2.5,
    }


@pytest.fixture
def sample_config_file(tmp_path: Path, sample_config_dict: Dict[str, Any]) -> Path:
    config_file = tmp_path / "inventory.json"
    config_file.write_text(json.dumps(sample_config_dict))
    return config_file
