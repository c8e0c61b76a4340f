"""Contract economics model for futures round-trip reporting."""

from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict


class ContractSpec(BaseModel):
    """Static economics of a futures contract.

    One instance exists per registered ticker symbol; operations and round
    trips share it by reference.
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )

    symbol: str = Field(..., min_length=1, description="Ticker symbol (e.g., M2K)")
    name: str = Field(..., description="Human readable contract name")
    market: str = Field(..., description="Exchange the contract trades on")
    tick_size: Decimal = Field(..., gt=0, description="Minimum price increment")
    tick_value: Decimal = Field(
        ..., gt=0, description="Money value of one tick per contract"
    )
    fee_per_contract: Decimal = Field(
        ..., ge=0, description="Fee charged per contract per side"
    )

    def __str__(self) -> str:
        return f"{self.symbol} ({self.name}, {self.market})"
