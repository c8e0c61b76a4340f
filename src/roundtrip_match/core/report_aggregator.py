"""Result collection and aggregation across report files."""

from typing import Any, Dict, List
import logging

from ..models import ReportResult, ReportSummary

logger = logging.getLogger(__name__)


class ReportAggregator:
    """Collects per-report results and produces the final recap."""

    def __init__(self) -> None:
        """Initialize result aggregator."""
        self.results: List[ReportResult] = []

    def add_result(self, result: ReportResult) -> None:
        """Add the outcome of one report.

        Args:
            result: Processed report (successful or failed)
        """
        self.results.append(result)
        if result.succeeded:
            logger.info(
                f"Added {result.source_name}: {result.summary.round_trip_count} round trips"
            )
        else:
            logger.info(f"Added failed report {result.source_name}")

    def get_successful_results(self) -> List[ReportResult]:
        return [r for r in self.results if r.succeeded]

    def get_failed_results(self) -> List[ReportResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def has_failures(self) -> bool:
        return any(not r.succeeded for r in self.results)

    def get_final_recap(self) -> ReportSummary:
        """Sum the summaries of all successful reports.

        Recomputed on every call from the stored results.

        Returns:
            ReportSummary over every successful report
        """
        recap = ReportSummary()
        for result in self.get_successful_results():
            recap = recap.combine(result.summary)
        return recap

    def get_processing_summary(self) -> Dict[str, Any]:
        """Get processing counts for display.

        Returns:
            Dictionary with report counts and failed report names
        """
        failed = self.get_failed_results()
        return {
            "reports_processed": len(self.results),
            "reports_succeeded": len(self.results) - len(failed),
            "reports_failed": len(failed),
            "failed_reports": [r.source_name for r in failed],
            "total_round_trips": sum(
                r.summary.round_trip_count for r in self.get_successful_results()
            ),
        }
