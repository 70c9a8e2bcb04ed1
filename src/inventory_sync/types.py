"""Data models for the inventory synchronization engine."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import (
    Any,
    Dict,
    Optional,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)


ProductId = Union[int, str]


class AlertSeverity(str, Enum):
    """Severity of a transient alert."""

    SUCCESS = "success"
    ERROR = "error"


class ModalState(str, Enum):
    """State of the create/edit modal."""

    CLOSED = "closed"
    CREATING = "creating"
    EDITING = "editing"


class ViewState(str, Enum):
    """What the product list area should currently show."""

    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


class Product(BaseModel):
    """Inventory item as stored by the remote service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: ProductId = Field(..., description="Identifier assigned by the remote service")
    name: str = Field(..., min_length=1, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., ge=0, description="Unit price in USD")
    quantity: int = Field(..., ge=0, description="Units in stock")
    category: Optional[str] = Field(None, description="Product category")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp assigned by the service")


class ProductDraft(BaseModel):
    """Raw form values for a product that has not been submitted yet.

    Numeric fields keep whatever the user typed; they are only coerced after
    validation passes.
    """

    name: str = ""
    description: str = ""
    price: Any = ""
    quantity: Any = ""
    category: str = ""


class ProductData(BaseModel):
    """Validated product fields handed to the repository on create/update."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    category: Optional[str] = None

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        """Send the price as a JSON number."""
        return float(price)

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON request body for the CRUD service."""
        return self.model_dump(mode="json")


class InventoryStats(BaseModel):
    """Aggregate statistics over the product collection."""

    total_products: int = 0
    total_value: Decimal = Decimal("0")
    total_stock: int = 0
    categories: int = 0


class Alert(BaseModel):
    """Transient notification raised by an operation outcome."""

    model_config = ConfigDict(frozen=True)

    message: str
    severity: AlertSeverity = AlertSeverity.SUCCESS
