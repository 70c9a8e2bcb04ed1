"""Configuration for the inventory client.

Configuration can come from a JSON file, a plain dictionary, or environment
variables (a ``.env`` file is honoured through python-dotenv).
"""

import json
import os
from pathlib import Path
from typing import (
    Any,
    Dict,
    Optional,
    Union,
)

from dotenv import (
    find_dotenv,
    load_dotenv,
)
from pydantic import (
    BaseModel,
    Field,
    field_validator,
)


ENV_PREFIX = "INVENTORY_"


class InventoryConfig(BaseModel):
    """Settings for the product CRUD service and the client session."""

    api_base_url: str = Field("http://localhost:8000/api", description="Base URL of the product CRUD API")
    api_token: Optional[str] = Field(None, description="Optional bearer token sent with every request")
    request_timeout: float = Field(10.0, gt=0, description="HTTP request timeout in seconds")
    alert_timeout: float = Field(5.0, gt=0, description="Seconds before an alert expires")

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so paths can be appended with a single slash."""
        value = value.strip()
        if not value:
            raise ValueError("api_base_url must not be empty")
        return value.rstrip("/")

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "InventoryConfig":
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            pydantic.ValidationError: If the content does not match the schema.
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        return cls.model_validate(json.loads(path.read_text(encoding="utf-8")))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "InventoryConfig":
        """Build configuration from a dictionary."""
        return cls.model_validate(config_dict)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "InventoryConfig":
        """Build configuration from ``<prefix><FIELD>`` environment variables.

        Unset variables fall back to the field defaults.
        """
        load_dotenv(find_dotenv(usecwd=True))
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{prefix}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)
