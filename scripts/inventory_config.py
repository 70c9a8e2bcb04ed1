#!/usr/bin/env python3
"""
Python script to generate the inventory client configuration file.
"""

import json
import sys
import tempfile
from pathlib import Path
from typing import (
    Any,
    Dict,
    Optional,
)

from pydantic import ValidationError

from inventory_sync import InventoryConfig


def create_or_update_config(
    api_base_url: str,
    config_file: Path,
    overrides: Optional[Dict[str, Any]] = None,
) -> bool:
    """Write ``api_base_url`` (and any overrides) into the JSON config file.

    Existing settings in the file are kept unless overridden. The result is
    validated against InventoryConfig before anything is written.

    Returns:
        True if the file was written.
    """
    try:
        config_data: Dict[str, Any] = {}
        if config_file.exists():
            config_data = json.loads(config_file.read_text(encoding="utf-8"))

        config_data["api_base_url"] = api_base_url
        config_data.update(overrides or {})

        config = InventoryConfig.from_dict(config_data)
        serialized = config.model_dump(exclude_none=True)

        # Write to a temporary file first, then replace atomically
        with tempfile.NamedTemporaryFile(mode="w", dir=config_file.parent, delete=False) as tmp:
            json.dump(serialized, tmp, indent=2)
            tmp_path = Path(tmp.name)

        tmp_path.replace(config_file)

        return True
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error updating config file {config_file}: {e}")
        return False


def main(default_config_file: str = "inventory.json") -> None:
    if len(sys.argv) < 2:
        print("Usage: python3 inventory_config.py <api_base_url> [config_file]")
        print("  api_base_url: Base URL of the product CRUD API (e.g. http://localhost:8000/api)")
        print(f"  config_file:  JSON config file to update (default: {default_config_file})")
        sys.exit(1)

    api_base_url = sys.argv[1]
    config_file = Path(sys.argv[2] if len(sys.argv) > 2 else default_config_file)

    if create_or_update_config(api_base_url, config_file):
        print(f"Configured inventory API '{api_base_url}' in {config_file}")
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
