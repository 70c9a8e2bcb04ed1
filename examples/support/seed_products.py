#!/usr/bin/env python3
"""Populate a demo product store with sample data and save it to a pickle file.

Usage:
    python -m examples.support.seed_products [output_file]

Arguments:
    output_file: Path to save the products (default: sample_products.pkl)
"""

import asyncio
import sys
from decimal import Decimal
from typing import (
    Any,
    Dict,
    List,
)

from examples.support.memory_repository import MemoryProductRepository
from inventory_sync import (
    ProductData,
    compute_stats,
)
from inventory_sync.utils import print_inventory_summary


SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "Ergonomic Office Chair",
        "description": "Mesh back chair with adjustable lumbar support",
        "price": Decimal("189.99"),
        "quantity": 12,
        "category": "Furniture",
    },
    {
        "name": "Standing Desk",
        "description": "Electric height-adjustable desk, 140x70 cm",
        "price": Decimal("449.00"),
        "quantity": 5,
        "category": "Furniture",
    },
    {
        "name": "Wireless Keyboard",
        "description": "Low-profile Bluetooth keyboard",
        "price": Decimal("59.90"),
        "quantity": 40,
        "category": "Electronics",
    },
    {
        "name": "USB-C Hub",
        "description": "7-in-1 hub with HDMI and card reader",
        "price": Decimal("34.50"),
        "quantity": 65,
        "category": "Electronics",
    },
    {
        "name": "27in Monitor",
        "description": "QHD IPS panel with height-adjustable stand",
        "price": Decimal("279.00"),
        "quantity": 8,
        "category": "Electronics",
    },
    {
        "name": "Notebook A5",
        "description": "Dotted paper, 120 pages",
        "price": Decimal("6.25"),
        "quantity": 300,
        "category": "Office Supplies",
    },
    {
        "name": "Desk Lamp",
        "description": None,
        "price": Decimal("24.99"),
        "quantity": 0,
        "category": None,
    },
]


def initialize_sample_products(output_file: str = "sample_products.pkl") -> MemoryProductRepository:
    """Create a repository holding the sample products and save it.

    Args:
        output_file: Path to save the products.

    Returns:
        MemoryProductRepository with the sample data.
    """
    repository = MemoryProductRepository(database_file=None)

    print("Creating sample products...")
    for product in repository.add_products(ProductData.model_validate(data) for data in SAMPLE_PRODUCTS):
        print(f"  Added product #{product.id}: {product.name} (qty: {product.quantity})")
    print()

    print(f"Saving products to {output_file}...")
    repository._save_to_file(output_file)
    print()

    print_inventory_summary(compute_stats(asyncio.run(repository.list())))
    print(f"Products saved to: {output_file}")

    return repository


def main() -> None:
    """Main entry point for the script."""
    output_file = sys.argv[1] if len(sys.argv) > 1 else "sample_products.pkl"
    initialize_sample_products(output_file)


if __name__ == "__main__":
    main()
