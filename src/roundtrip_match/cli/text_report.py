"""Plain-text report rendering and report file output."""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from ..config import RoundTripConfigManager
from ..models import ReportResult, ReportSummary, RoundTripOperation

logger = logging.getLogger(__name__)

SEPARATOR = "----------------------------------------"
REPORT_BANNER = "########################## {name} ##########################"
RECAP_BANNER = "####################### Final Recap ###########################"


class TextReportRenderer:
    """Renders round trips and totals in the plain-text report layout."""

    def __init__(self, config_manager: Optional[RoundTripConfigManager] = None):
        self.config_manager = config_manager or RoundTripConfigManager()

    def render_round_trip(self, round_trip: RoundTripOperation) -> str:
        """Render the detail block of one round trip."""
        open_op = round_trip.open_operation
        close_op = round_trip.close_operation
        lines = [
            f"Entry Date: {open_op.trade_date}   Exit Date:{close_op.trade_date}",
            f"Profit/Loss Including Fees: {round_trip.profit_loss_including_fees}",
            f"Profit/Loss: {round_trip.profit_loss}",
            f"Fees: {round_trip.fees}",
            f"Operation Type: {round_trip.side.value}",
            f"Contract: {open_op.contract_description}",
            f"Entry Price: {open_op.price}     Trade Number: {open_op.trade_number}",
            f"Exit Price: {close_op.price}     Trade Number: {close_op.trade_number}",
            f"Ticks: {round_trip.ticks}",
            f"Quantity: {round_trip.quantity}",
            f"Currency: {open_op.currency}",
        ]
        return "\n".join(lines) + "\n"

    def render_summary(self, summary: ReportSummary) -> str:
        """Render the totals block."""
        lines = [
            f"Total Profit/Loss Including Fees: {summary.total_profit_loss_including_fees}",
            f"Total Profit/Loss: {summary.total_profit_loss}",
            f"Total Ticks: {summary.total_ticks}",
            f"Total Fees: {summary.total_fees}",
        ]
        return "\n".join(lines) + "\n"

    def render_report(
        self, round_trips: Sequence[RoundTripOperation], summary: Optional[ReportSummary] = None
    ) -> str:
        """Render every round trip of one report followed by its totals.

        Args:
            round_trips: Round trips of the report
            summary: Precomputed totals. Computed from round_trips if None.

        Returns:
            Report text
        """
        summary = summary or ReportSummary.from_round_trips(round_trips)
        blocks: List[str] = []
        for round_trip in round_trips:
            blocks.append(self.render_round_trip(round_trip) + SEPARATOR + "\n")
        blocks.append(self.render_summary(summary))
        return "\n".join(blocks)

    def render_batch(self, results: Sequence[ReportResult], recap: ReportSummary) -> str:
        """Render one section per report and the final recap.

        Failed reports show their error in place of round trips.
        """
        sections: List[str] = []
        for result in results:
            sections.append(REPORT_BANNER.format(name=result.source_name))
            if result.succeeded:
                sections.append(self.render_report(result.round_trips, result.summary))
            else:
                sections.append(f"Report failed: {result.error}\n")

        sections.append(RECAP_BANNER)
        sections.append(self.render_summary(recap))
        return "\n".join(sections)

    def write_output_file(
        self, report_text: str, output_dir: Path, timestamp: Optional[datetime] = None
    ) -> Path:
        """Write report text to ``<prefix><timestamp>.txt`` in output_dir.

        The directory is created if it doesn't exist.

        Returns:
            Path of the written file
        """
        config = self.config_manager.matching_config
        stamp = (timestamp or datetime.now()).strftime(config.output_timestamp_format)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{config.output_file_prefix}{stamp}.txt"
        output_path.write_text(report_text, encoding="utf-8")
        logger.info(f"Wrote report to {output_path}")
        return output_path
