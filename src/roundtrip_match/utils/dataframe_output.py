"""DataFrame output utilities for round-trip reporting."""

from pathlib import Path
from typing import List, Sequence
import logging
import pandas as pd

from ..models import ReportResult, RoundTripOperation

logger = logging.getLogger(__name__)

ROUND_TRIP_COLUMNS = [
    "source",
    "side",
    "contract",
    "quantity",
    "entry_date",
    "exit_date",
    "entry_price",
    "exit_price",
    "open_trade_number",
    "close_trade_number",
    "buy_trade_number",
    "sell_trade_number",
    "ticks",
    "profit_loss",
    "fees",
    "profit_loss_including_fees",
    "currency",
]


def round_trip_record(round_trip: RoundTripOperation, source: str = "") -> dict:
    """Flatten one round trip into a DataFrame record. Money stays Decimal."""
    return {
        "source": source,
        "side": round_trip.side.value,
        "contract": round_trip.contract.symbol,
        "quantity": round_trip.quantity,
        "entry_date": round_trip.entry_date,
        "exit_date": round_trip.exit_date,
        "entry_price": round_trip.entry_price,
        "exit_price": round_trip.exit_price,
        "open_trade_number": round_trip.open_operation.trade_number,
        "close_trade_number": round_trip.close_operation.trade_number,
        "buy_trade_number": round_trip.buy_operation.trade_number,
        "sell_trade_number": round_trip.sell_operation.trade_number,
        "ticks": round_trip.ticks,
        "profit_loss": round_trip.profit_loss,
        "fees": round_trip.fees,
        "profit_loss_including_fees": round_trip.profit_loss_including_fees,
        "currency": round_trip.open_operation.currency,
    }


def create_round_trip_dataframe(
    round_trips: Sequence[RoundTripOperation], source: str = ""
) -> pd.DataFrame:
    """Create a DataFrame with one row per round trip, in match order."""
    records = [round_trip_record(rt, source) for rt in round_trips]
    return pd.DataFrame(records, columns=ROUND_TRIP_COLUMNS)


def create_batch_dataframe(results: Sequence[ReportResult]) -> pd.DataFrame:
    """Create one DataFrame covering the round trips of every successful report."""
    records: List[dict] = []
    for result in results:
        if not result.succeeded:
            continue
        records.extend(round_trip_record(rt, result.source_name) for rt in result.round_trips)
    return pd.DataFrame(records, columns=ROUND_TRIP_COLUMNS)


def export_round_trips_csv(results: Sequence[ReportResult], output_path: Path) -> Path:
    """Write the round trips of a batch to CSV.

    Args:
        results: Processed reports
        output_path: Destination CSV file (parent directories are created)

    Returns:
        Path of the written file
    """
    frame = create_batch_dataframe(results)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output_path, index=False)
    logger.info(f"Exported {len(frame)} round trips to {output_path}")
    return output_path
