"""Report-level result models for round-trip processing."""

from decimal import Decimal
from typing import Iterable, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .round_trip import RoundTripOperation

ZERO = Decimal("0")


class ReportSummary(BaseModel):
    """Totals over a list of round trips (one report or a whole batch)."""

    model_config = ConfigDict(frozen=True)

    round_trip_count: int = Field(0, ge=0)
    total_quantity: int = Field(0, ge=0)
    total_profit_loss: Decimal = Field(ZERO)
    total_profit_loss_including_fees: Decimal = Field(ZERO)
    total_ticks: Decimal = Field(ZERO)
    total_fees: Decimal = Field(ZERO)

    @classmethod
    def from_round_trips(cls, round_trips: Iterable[RoundTripOperation]) -> "ReportSummary":
        """Sum per-trip figures. Pure: the same list always gives the same totals.

        Args:
            round_trips: Round trips produced by the matcher

        Returns:
            ReportSummary with all totals
        """
        count = 0
        quantity = 0
        profit_loss = ZERO
        profit_loss_including_fees = ZERO
        ticks = ZERO
        fees = ZERO

        for round_trip in round_trips:
            count += 1
            quantity += round_trip.quantity
            profit_loss += round_trip.profit_loss
            profit_loss_including_fees += round_trip.profit_loss_including_fees
            ticks += round_trip.ticks
            fees += round_trip.fees

        return cls(
            round_trip_count=count,
            total_quantity=quantity,
            total_profit_loss=profit_loss,
            total_profit_loss_including_fees=profit_loss_including_fees,
            total_ticks=ticks,
            total_fees=fees,
        )

    def combine(self, other: "ReportSummary") -> "ReportSummary":
        """Return a new summary holding the totals of both."""
        return ReportSummary(
            round_trip_count=self.round_trip_count + other.round_trip_count,
            total_quantity=self.total_quantity + other.total_quantity,
            total_profit_loss=self.total_profit_loss + other.total_profit_loss,
            total_profit_loss_including_fees=(
                self.total_profit_loss_including_fees
                + other.total_profit_loss_including_fees
            ),
            total_ticks=self.total_ticks + other.total_ticks,
            total_fees=self.total_fees + other.total_fees,
        )


class ReportResult(BaseModel):
    """Outcome of processing one input report.

    A failed report keeps its error message instead of round trips so that a
    multi-report run can carry on with the remaining files.
    """

    model_config = ConfigDict(frozen=True)

    source_name: str = Field(..., description="File name of the processed report")
    round_trips: List[RoundTripOperation] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)
    error: Optional[str] = Field(None, description="Error message if processing failed")

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error:
            return f"ReportResult({self.source_name}: FAILED - {self.error})"
        return f"ReportResult({self.source_name}: {self.summary.round_trip_count} round trips)"
