"""Interactive inventory console client.

This example demonstrates how to use the inventory-sync library to build an
interactive front end: it lists products with aggregate statistics, searches
the list, and creates, edits and deletes products through a text form.
"""

import argparse
import asyncio
import traceback
from typing import Optional

from dotenv import (
    find_dotenv,
    load_dotenv,
)
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
    InventoryController,
    Product,
)
from inventory_sync.utils import (
    configure_logging,
    print_inventory_summary,
)


load_dotenv(find_dotenv())

HELP_TEXT = """Commands:
  list                 Show statistics and the (filtered) product list
  search [text]        Filter by name, category or description (no text clears)
  add                  Create a new product
  edit <id>            Edit a product
  delete <id>          Delete a product
  refresh              Reload products from the service
  help                 Show this help
  exit | quit          Leave the client
"""


async def ask_confirmation(product: Product) -> bool:
    return await asyncio.to_thread(confirm_delete, product)


def render(controller: InventoryController) -> None:
    """Print alert, statistics and product area."""
    alert_text = render_alert(controller.alert)
    if alert_text:
        print(alert_text)
    print_inventory_summary(controller.stats)
    if controller.search_query:
        print(f"Search: '{controller.search_query}'")
    print(
        render_product_area(
            controller.view_state,
            controller.filtered_products,
            controller.error,
            controller.empty_message,
        )
    )
    print()


async def run_form(controller: InventoryController) -> None:
    """Collect form input until it is submitted successfully or the user gives up."""
    print(f"\n{controller.modal_title}")
    draft = prompt_product_form(controller.editing_product)

    while controller.modal_open:
        errors = await controller.submit_form(draft)
        if errors:
            draft = prompt_draft(draft, errors)
            continue

        print(render_alert(controller.alert))

        # Submission failed remotely; the modal stays open with the typed values
        if controller.modal_open:
            retry = input("Retry? [y/N]: ").strip().lower()
            if retry not in ("y", "yes"):
                controller.close_modal()


async def handle_command(controller: InventoryController, command: str, argument: str) -> None:
    if command in ("list", "ls"):
        render(controller)
    elif command == "search":
        controller.set_search_query(argument)
        render(controller)
    elif command == "add":
        controller.open_create_modal()
        await run_form(controller)
    elif command in ("edit", "delete"):
        product = find_product(controller.products, argument)
        if product is None:
            print(f"Product '{argument}' not found.")
            return
        if command == "edit":
            controller.open_edit_modal(product)
            await run_form(controller)
        else:
            await controller.delete_product(product)
            alert_text = render_alert(controller.alert)
            if alert_text:
                print(alert_text)
    elif command == "refresh":
        await controller.refresh()
        render(controller)
    elif command == "help":
        print(HELP_TEXT)
    else:
        print(f"Unknown command '{command}'. Type 'help' for the list of commands.")


async def run(
    config_path: Optional[str] = None,
    demo_file: Optional[str] = None,
    demo: bool = False,
    verbose: bool = False,
) -> None:
    """Run the inventory console.

    Args:
        config_path: Path to a JSON configuration file for the HTTP service.
        demo_file: Pickle file backing the in-memory demo service.
        demo: Use the in-memory demo service instead of HTTP.
        verbose: Enable informational logging.
    """
    configure_logging(level="INFO" if verbose else "WARNING")

    try:
        if demo:
            controller = InventoryController(MemoryProductRepository(database_file=demo_file), confirm=ask_confirmation)
        elif config_path:
            controller = InventoryController.from_config(config_path, confirm=ask_confirmation)
        else:
            config = InventoryConfig.from_env()
            controller = InventoryController.from_settings(config, confirm=ask_confirmation)

        async with controller:
            print("Inventory Console")
            print("Type 'help' for commands, 'exit' or 'quit' to leave\n")
            render(controller)

            query = input("> ").strip()
            while query.lower() not in ("exit", "quit"):
                if query:
                    command, _, argument = query.partition(" ")
                    await handle_command(controller, command.lower(), argument.strip())
                query = input("> ").strip()

    except FileNotFoundError as e:
        print(f"Configuration error: {e}")
    except Exception:
        print("An error occurred:")
        traceback.print_exc()


def main() -> None:
    """Parse command-line arguments and run the console client."""
    parser = argparse.ArgumentParser(
        description="Interactive inventory management console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --demo
  %(prog)s --demo --demo-file sample_products.pkl
  %(prog)s --config inventory.json --verbose
  %(prog)s                    (reads INVENTORY_* variables / .env)
        """,
    )

    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to inventory client configuration JSON file",
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the in-memory demo product service",
    )

    parser.add_argument(
        "--demo-file",
        default=None,
        help="Pickle file persisting the demo service between runs",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()
    asyncio.run(run(config_path=args.config, demo_file=args.demo_file, demo=args.demo, verbose=args.verbose))


if __name__ == "__main__":
    main()
