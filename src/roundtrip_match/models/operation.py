"""Operation data model: a single buy or sell execution."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .contract import ContractSpec

# Orderable key supplied by the loaders: trade number or fill timestamp
SequenceKey = Union[int, datetime]


class Side(str, Enum):
    """Direction of an execution."""

    BUY = "Buy"
    SELL = "Sell"


class Operation(BaseModel):
    """Represents one normalized trade execution.

    Everything is frozen except ``remaining_quantity``, which is the matching
    state owned by the round-trip matcher. It starts at ``quantity`` and is
    only lowered through ``consume``.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    # Ordering
    sequence_key: SequenceKey = Field(
        ..., frozen=True, description="Key used to order operations (oldest first)"
    )
    trade_number: int = Field(..., frozen=True, description="Broker trade number")
    trade_date: datetime = Field(..., frozen=True, description="Trade date or fill time")

    # Trading details
    side: Side = Field(..., frozen=True, description="Buy or Sell")
    quantity: int = Field(..., gt=0, frozen=True, description="Originally reported quantity")
    remaining_quantity: int = Field(..., ge=0, description="Quantity not yet matched")
    price: Decimal = Field(..., frozen=True, description="Trade price")

    # Instrument
    contract: ContractSpec = Field(..., frozen=True, description="Resolved contract economics")
    contract_description: str = Field(
        ..., frozen=True, description="Contract text as it appeared in the input"
    )
    market: str = Field("", frozen=True, description="Market of the contract")
    currency: str = Field("USD", frozen=True, description="Trade currency")

    @model_validator(mode="before")
    @classmethod
    def _default_remaining_quantity(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("remaining_quantity") is None:
            data = dict(data)
            data["remaining_quantity"] = data.get("quantity")
        return data

    @model_validator(mode="after")
    def _check_remaining_quantity(self) -> "Operation":
        if self.remaining_quantity > self.quantity:
            raise ValueError(
                f"remaining_quantity {self.remaining_quantity} exceeds quantity {self.quantity}"
            )
        return self

    @property
    def is_buy(self) -> bool:
        return self.side is Side.BUY

    @property
    def is_consumed(self) -> bool:
        """True once every unit of this operation has been matched."""
        return self.remaining_quantity == 0

    @property
    def display_id(self) -> str:
        """Get a display-friendly ID for logging and output."""
        return f"#{self.trade_number}"

    def consume(self, quantity: int) -> int:
        """Lower the remaining quantity by a matched amount.

        Args:
            quantity: Matched quantity, must be positive and not exceed what remains

        Returns:
            The remaining quantity after the decrement

        Raises:
            ValueError: If quantity is not positive or exceeds the remaining quantity
        """
        if quantity <= 0:
            raise ValueError(f"Matched quantity must be positive, got {quantity}")
        if quantity > self.remaining_quantity:
            raise ValueError(
                f"Cannot consume {quantity} from operation {self.display_id}: "
                f"only {self.remaining_quantity} remaining"
            )
        self.remaining_quantity -= quantity
        return self.remaining_quantity

    def __str__(self) -> str:
        return (
            f"Operation({self.display_id}: {self.side.value} "
            f"{self.remaining_quantity}/{self.quantity} {self.contract.symbol} @ {self.price})"
        )
