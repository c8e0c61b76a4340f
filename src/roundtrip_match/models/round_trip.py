"""Round-trip data model: one opening leg matched against one closing leg."""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict

from .contract import ContractSpec
from .operation import Operation, Side


class RoundTripOperation(BaseModel):
    """Represents a matched pair of opposite-side executions.

    Created once per match by the FIFO matcher. The operations are held by
    reference, so an operation split across several matches appears in
    several round trips.
    """

    model_config = ConfigDict(
        frozen=True,  # Immutable for audit trail
    )

    side: Side = Field(..., description="Side of the opening leg")
    quantity: int = Field(..., gt=0, description="Quantity matched in this pairing")

    open_operation: Operation = Field(..., description="Leg that opened the position")
    close_operation: Operation = Field(..., description="Leg that closed the position")
    buy_operation: Operation = Field(..., description="Buy leg of the pairing")
    sell_operation: Operation = Field(..., description="Sell leg of the pairing")

    contract: ContractSpec = Field(..., description="Contract of the opening leg")

    ticks: Decimal = Field(..., description="Signed tick movement for the matched quantity")
    profit_loss: Decimal = Field(..., description="ticks x tick value")
    fees: Decimal = Field(..., ge=0, description="Round-trip fees (both sides)")

    @property
    def profit_loss_including_fees(self) -> Decimal:
        """Net result after fees."""
        return self.profit_loss - self.fees

    @property
    def entry_price(self) -> Decimal:
        return self.open_operation.price

    @property
    def exit_price(self) -> Decimal:
        return self.close_operation.price

    @property
    def entry_date(self) -> datetime:
        return self.open_operation.trade_date

    @property
    def exit_date(self) -> datetime:
        return self.close_operation.trade_date

    @property
    def is_winner(self) -> bool:
        return self.profit_loss_including_fees > 0

    @property
    def summary_line(self) -> str:
        """Get a one-line summary of this round trip for display."""
        return (
            f"{self.side.value} {self.quantity} {self.contract.symbol}: "
            f"{self.open_operation.display_id} @ {self.entry_price} -> "
            f"{self.close_operation.display_id} @ {self.exit_price} | "
            f"Ticks: {self.ticks} | P/L: {self.profit_loss} | Fees: {self.fees}"
        )

    def __str__(self) -> str:
        return f"RoundTripOperation({self.summary_line})"
