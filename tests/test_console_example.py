"""
Tests for the console example (examples/client and examples/support).

The console client is exercised against the in-memory demo repository, with
user input supplied through a patched ``input()``.
"""

from decimal import Decimal
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest

from examples.client.inventory_console import (
    ask_confirmation,
    handle_command,
)
from examples.support.console import (
    find_product,
    prompt_draft,
    render_alert,
    render_product_area,
    render_product_card,
)
from examples.support.memory_repository import MemoryProductRepository
from examples.support.seed_products import (
    SAMPLE_PRODUCTS,
    initialize_sample_products,
)
from inventory_sync import (
    Alert,
    AlertSeverity,
    InventoryController,
    Product,
    ProductData,
    ProductDraft,
    RepositoryError,
    ViewState,
)


@pytest.fixture
def memory_repository() -> MemoryProductRepository:
    repository = MemoryProductRepository()
    repository.add_products(
        [
            ProductData(name="Office Chair", price=Decimal("189.99"), quantity=12, category="Furniture"),
            ProductData(name="Desk Lamp", price=Decimal("24.99"), quantity=0),
        ]
    )
    return repository


# ============================================================================
# Memory Repository Tests
# ============================================================================


class TestMemoryProductRepository:
    """Tests for the in-memory demo service."""

    @pytest.mark.asyncio
    async def test_crud_cycle(self, memory_repository: MemoryProductRepository) -> None:
        created = await memory_repository.create(ProductData(name="Stapler", price=Decimal("4.5"), quantity=9))
        assert created.id == 3
        assert created.created_at is not None

        updated = await memory_repository.update(3, ProductData(name="Stapler XL", price=Decimal("6"), quantity=2))
        assert updated.id == 3
        assert updated.created_at == created.created_at
        assert updated.name == "Stapler XL"

        await memory_repository.delete("3")
        assert [p.id for p in await memory_repository.list()] == [1, 2]

    @pytest.mark.asyncio
    async def test_unknown_product_raises_not_found(self, memory_repository: MemoryProductRepository) -> None:
        with pytest.raises(RepositoryError) as exc_info:
            await memory_repository.delete(99)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_injected_failure(self, memory_repository: MemoryProductRepository) -> None:
        memory_repository.fail_operations.add("list")

        with pytest.raises(RepositoryError, match="list"):
            await memory_repository.list()

    @pytest.mark.asyncio
    async def test_persists_on_close(self, tmp_path: Path) -> None:
        database_file = str(tmp_path / "products.pkl")
        repository = MemoryProductRepository(database_file=database_file)
        repository.add_products([ProductData(name="Mug", price=Decimal("3"), quantity=1)])
        await repository.close()

        reloaded = MemoryProductRepository(database_file=database_file)
        products = await reloaded.list()

        assert [p.name for p in products] == ["Mug"]
        created = await reloaded.create(ProductData(name="Cup", price=Decimal("2"), quantity=1))
        assert created.id == 2

    def test_seed_products(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        output_file = tmp_path / "sample_products.pkl"

        initialize_sample_products(str(output_file))

        assert output_file.exists()
        assert len(MemoryProductRepository(database_file=str(output_file))._products) == len(SAMPLE_PRODUCTS)
        summary = [line for line in capsys.readouterr().out.splitlines() if line.startswith("Total Products")]
        assert summary[0].split()[-1] == "7"


# ============================================================================
# Rendering Helper Tests
# ============================================================================


class TestConsoleHelpers:
    """Tests for the text rendering and input helpers."""

    def test_render_product_card(self, sample_products: List[Product]) -> None:
        card = render_product_card(sample_products[2])

        assert card.splitlines() == [
            "#3 Desk Lamp",
            "    No description available",
            "    Price: $24.99   In Stock: 0",
            "    Added Jan 5, 2024",
        ]

    def test_render_product_card_with_category(self, sample_products: List[Product]) -> None:
        assert render_product_card(sample_products[0]).startswith("#1 Office Chair  [Furniture]")

    def test_render_alert(self) -> None:
        assert render_alert(None) == ""
        assert render_alert(Alert(message="Saved")) == "[OK] Saved"
        assert render_alert(Alert(message="Failed", severity=AlertSeverity.ERROR)) == "[ERROR] Failed"

    def test_render_product_area_states(self, sample_products: List[Product]) -> None:
        empty = ("No products yet", "Get started by adding your first product")

        assert render_product_area(ViewState.LOADING, [], None, empty) == "Loading products..."
        assert "boom" in render_product_area(ViewState.ERROR, [], "boom", empty)
        assert render_product_area(ViewState.EMPTY, [], None, empty) == "\n".join(empty)
        assert render_product_area(ViewState.READY, sample_products, None, empty).count("#") == 3

    def test_find_product(self, sample_products: List[Product]) -> None:
        assert find_product(sample_products, " 2 ") == sample_products[1]
        assert find_product(sample_products, "42") is None

    def test_prompt_draft_keeps_current_values_on_enter(self, capsys: pytest.CaptureFixture) -> None:
        current = ProductDraft(name="Lamp", price="abc", quantity="3")

        with patch("builtins.input", side_effect=["", "", "9.50", "", ""]):
            draft = prompt_draft(current, {"price": "Please enter a valid price"})

        assert draft.name == "Lamp"
        assert draft.price == "9.50"
        assert draft.quantity == "3"
        assert "Please enter a valid price" in capsys.readouterr().out


# ============================================================================
# Console Command Tests
# ============================================================================


class TestConsoleCommands:
    """Tests for handle_command() driving a real controller."""

    @pytest.mark.asyncio
    async def test_add_command_creates_product(self, memory_repository: MemoryProductRepository) -> None:
        async with InventoryController(memory_repository) as controller:
            with patch("builtins.input", side_effect=["Stapler", "", "4.50", "9", "Office"]):
                await handle_command(controller, "add", "")

            assert controller.modal_open is False
            assert [p.name for p in controller.products][-1] == "Stapler"
            assert controller.stats.total_products == 3

    @pytest.mark.asyncio
    async def test_add_command_reprompts_on_invalid_values(self, memory_repository: MemoryProductRepository) -> None:
        answers = ["", "", "abc", "3", ""] + ["Stapler", "", "4.50", "", ""]

        async with InventoryController(memory_repository) as controller:
            with patch("builtins.input", side_effect=answers):
                await handle_command(controller, "add", "")

            stapler = controller.products[-1]
            assert stapler.name == "Stapler"
            assert stapler.quantity == 3

    @pytest.mark.asyncio
    async def test_edit_command_gives_up_after_failure(
        self, memory_repository: MemoryProductRepository, capsys: pytest.CaptureFixture
    ) -> None:
        memory_repository.fail_operations.add("update")

        async with InventoryController(memory_repository) as controller:
            with patch("builtins.input", side_effect=["Chair", "", "", "", "", "n"]):
                await handle_command(controller, "edit", "1")

            assert controller.modal_open is False
            assert controller.products[0].name == "Office Chair"

        assert "[ERROR]" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_delete_command_asks_for_confirmation(self, memory_repository: MemoryProductRepository) -> None:
        async with InventoryController(memory_repository, confirm=ask_confirmation) as controller:
            with patch("builtins.input", return_value="y"):
                await handle_command(controller, "delete", "2")

            assert [p.id for p in controller.products] == [1]

    @pytest.mark.asyncio
    async def test_search_and_unknown_commands(
        self, memory_repository: MemoryProductRepository, capsys: pytest.CaptureFixture
    ) -> None:
        async with InventoryController(memory_repository) as controller:
            await handle_command(controller, "search", "lamp")
            assert [p.id for p in controller.filtered_products] == [2]

            await handle_command(controller, "edit", "99")
            await handle_command(controller, "frobnicate", "")

        output = capsys.readouterr().out
        assert "Product '99' not found." in output
        assert "Unknown command 'frobnicate'" in output
