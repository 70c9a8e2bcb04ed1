"""Interactive inventory console client built on the synchronous controller.

Same commands as inventory_console.py, written without async/await: the
controller runs on a background event loop owned by SyncInventoryController.
"""

import argparse
import traceback
from typing import Optional

from dotenv import (
    find_dotenv,
    load_dotenv,
)
from examples.client.inventory_console import HELP_TEXT
from examples.support.console import (
    confirm_delete,
    find_product,
    prompt_draft,
    prompt_product_form,
    render_alert,
    render_product_area,
)
from examples.support.memory_repository import MemoryProductRepository
from inventory_sync import (
    InventoryConfig,
    SyncInventoryController,
)
from inventory_sync.utils import (
    configure_logging,
    print_inventory_summary,
)


load_dotenv(find_dotenv())


def render(inventory: SyncInventoryController) -> None:
    """Print alert, statistics and product area."""
    alert_text = render_alert(inventory.alert)
    if alert_text:
        print(alert_text)
    print_inventory_summary(inventory.stats)
    print(
        render_product_area(
            inventory.view_state,
            inventory.filtered_products,
            inventory.error,
            inventory.empty_message,
        )
    )
    print()


def run_form(inventory: SyncInventoryController) -> None:
    """Collect form input until it is submitted successfully or the user gives up."""
    print(f"\n{inventory.modal_title}")
    draft = prompt_product_form(inventory.editing_product)

    while inventory.modal_open:
        errors = inventory.submit_form(draft)
        if errors:
            draft = prompt_draft(draft, errors)
            continue

        print(render_alert(inventory.alert))
        if inventory.modal_open:
            retry = input("Retry? [y/N]: ").strip().lower()
            if retry not in ("y", "yes"):
                inventory.close_modal()


def handle_command(inventory: SyncInventoryController, command: str, argument: str) -> None:
    if command in ("list", "ls"):
        render(inventory)
    elif command == "search":
        inventory.set_search_query(argument)
        render(inventory)
    elif command == "add":
        inventory.open_create_modal()
        run_form(inventory)
    elif command in ("edit", "delete"):
        product = find_product(inventory.products, argument)
        if product is None:
            print(f"Product '{argument}' not found.")
        elif command == "edit":
            inventory.open_edit_modal(product)
            run_form(inventory)
        else:
            inventory.delete_product(product)
            print(render_alert(inventory.alert))
    elif command == "refresh":
        inventory.refresh()
        render(inventory)
    elif command == "help":
        print(HELP_TEXT)
    else:
        print(f"Unknown command '{command}'. Type 'help' for the list of commands.")


def run(config_path: Optional[str] = None, demo: bool = False, verbose: bool = False) -> None:
    """Run the synchronous inventory console."""
    configure_logging(level="INFO" if verbose else "WARNING")

    try:
        if demo:
            inventory = SyncInventoryController(repository=MemoryProductRepository(), confirm=confirm_delete)
        elif config_path:
            inventory = SyncInventoryController.from_config(config_path, confirm=confirm_delete)
        else:
            inventory = SyncInventoryController(config=InventoryConfig.from_env(), confirm=confirm_delete)

        with inventory:
            print("Inventory Console (sync)")
            print("Type 'help' for commands, 'exit' or 'quit' to leave\n")
            render(inventory)

            query = input("> ").strip()
            while query.lower() not in ("exit", "quit"):
                if query:
                    command, _, argument = query.partition(" ")
                    handle_command(inventory, command.lower(), argument.strip())
                query = input("> ").strip()

    except FileNotFoundError as e:
        print(f"Configuration error: {e}")
    except Exception:
        print("An error occurred:")
        traceback.print_exc()


def main() -> None:
    """Parse command-line arguments and run the console client."""
    parser = argparse.ArgumentParser(description="Interactive inventory management console (synchronous)")
    parser.add_argument("--config", "-c", default=None, help="Path to inventory client configuration JSON file")
    parser.add_argument("--demo", action="store_true", help="Use the in-memory demo product service")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    run(config_path=args.config, demo=args.demo, verbose=args.verbose)


if __name__ == "__main__":
    main()
