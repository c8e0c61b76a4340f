"""Main entry point for the futures round-trip report system."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence
import argparse
import sys

from .cli import RoundTripDisplay, TextReportRenderer
from .config import MalformedRecordPolicy, ReportType, RoundTripConfigManager
from .core import ContractRegistry, ReportAggregator
from .loaders import BaseReportLoader, CQGCSVLoader, StatementTextLoader
from .matchers import FIFOMatcher
from .models import Operation, ReportResult, ReportSummary
from .normalizers import OperationNormalizer
from .utils import export_round_trips_csv
from .validation import RoundTripError

# Default locations, relative to the working directory
DEFAULT_INPUT_DIR = Path("Input")
DEFAULT_OUTPUT_DIR = Path("Generated Reports")

# File patterns per report family
INPUT_PATTERNS: Dict[ReportType, str] = {
    ReportType.STATEMENT: "*.txt",
    ReportType.CQG: "*.csv",
}


logger = logging.getLogger(__name__)


class RoundTripReportEngine:
    """Main round-trip report engine."""

    config_manager: RoundTripConfigManager
    registry: ContractRegistry
    normalizer: OperationNormalizer
    loaders: Dict[ReportType, BaseReportLoader]
    matcher: FIFOMatcher
    display: RoundTripDisplay
    renderer: TextReportRenderer

    def __init__(
        self,
        config_manager: Optional[RoundTripConfigManager] = None,
        display: Optional[RoundTripDisplay] = None,
    ):
        """Initialize report engine.

        Args:
            config_manager: Optional config manager. Creates default if None.
            display: Optional console display. Creates default if None.
        """
        self.config_manager = config_manager or RoundTripConfigManager()
        self.registry = ContractRegistry.from_config(self.config_manager)
        self.normalizer = OperationNormalizer(self.config_manager, self.registry)
        self.loaders = {
            ReportType.STATEMENT: StatementTextLoader(self.config_manager, self.normalizer),
            ReportType.CQG: CQGCSVLoader(self.config_manager, self.normalizer),
        }
        self.matcher = FIFOMatcher(self.config_manager)
        self.display = display or RoundTripDisplay()
        self.renderer = TextReportRenderer(self.config_manager)

        logger.info(f"Initialized report engine with contracts: {', '.join(self.registry.symbols())}")

    def load_operations(self, path: Path, report_type: ReportType) -> List[Operation]:
        """Load the operations of one report file.

        Args:
            path: Input file
            report_type: Report family of the file

        Returns:
            Fresh Operation objects for this report
        """
        loader = self.loaders.get(report_type)
        if loader is None:
            raise ValueError(f"Report type not supported: {report_type}")
        return loader.load(path)

    def process_report(self, path: Path, report_type: ReportType) -> ReportResult:
        """Load, match and summarize one report.

        Errors of the report itself (bad rows, unknown contracts, unbalanced
        quantities, unreadable file) are recorded in the result instead of raised.

        Args:
            path: Input file
            report_type: Report family of the file

        Returns:
            ReportResult with round trips and summary, or with the error
        """
        source_name = path.name
        try:
            operations = self.load_operations(path, report_type)
            self.display.show_loading_summary(source_name, len(operations))

            round_trips = self.matcher.find_round_trips(operations, source_name=source_name)
            summary = ReportSummary.from_round_trips(round_trips)

        except (RoundTripError, OSError, ValueError) as e:
            logger.error(f"Error processing report {source_name}: {e}")
            self.display.show_error(f"{source_name}: {e!s}")
            return ReportResult(source_name=source_name, error=str(e))

        self.display.show_round_trips(source_name, round_trips)
        self.display.show_summary(f"{source_name}: Summary", summary)
        return ReportResult(source_name=source_name, round_trips=round_trips, summary=summary)

    def run(
        self,
        paths: Sequence[Path],
        report_type: ReportType,
        output_dir: Optional[Path] = None,
        export_csv: Optional[Path] = None,
    ) -> ReportAggregator:
        """Process several reports and produce the final recap.

        A failing report does not stop the others.

        Args:
            paths: Report files, processed in the given order
            report_type: Report family of every file
            output_dir: Directory for the text report. No file is written if None.
            export_csv: Optional CSV path for the round trips of every report

        Returns:
            ReportAggregator holding every ReportResult
        """
        self.display.show_header()
        aggregator = ReportAggregator()

        for path in paths:
            logger.info(f"Processing report {path}")
            aggregator.add_result(self.process_report(path, report_type))

        recap = aggregator.get_final_recap()
        self.display.show_final_recap(recap, aggregator.get_processing_summary())

        if output_dir is not None:
            report_text = self.renderer.render_batch(aggregator.results, recap)
            output_path = self.renderer.write_output_file(report_text, output_dir)
            self.display.show_output_file(output_path)

        if export_csv is not None:
            export_round_trips_csv(aggregator.results, export_csv)

        return aggregator

    def show_rules(self) -> None:
        """Display information about the matching rule."""
        self.display.show_header()
        self.display.show_rule_info(self.matcher.get_rule_info())


def discover_input_files(input_dir: Path, report_type: ReportType) -> List[Path]:
    """List the report files of one family in a directory, sorted by name.

    Args:
        input_dir: Directory to scan
        report_type: Report family

    Returns:
        Sorted list of matching files (empty if the directory doesn't exist)
    """
    if not input_dir.is_dir():
        return []
    return sorted(p for p in input_dir.glob(INPUT_PATTERNS[report_type]) if p.is_file())


def setup_logging(log_level: str = "NONE") -> None:
    """Set up logging configuration for round-trip reporting.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, NONE)
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_level.upper() == "NONE":
        logging.getLogger().setLevel(logging.CRITICAL + 1)  # Higher than CRITICAL
        return

    # Set up logging based on level
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Futures Round-Trip Report System")
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Report files to process (default: every matching file in --input-dir)",
    )
    parser.add_argument(
        "--input-dir",
        type=Path,
        default=DEFAULT_INPUT_DIR,
        help=f"Directory scanned when no files are given (default: {DEFAULT_INPUT_DIR})",
    )
    parser.add_argument(
        "--report-type",
        choices=[t.value for t in ReportType],
        default=None,
        help="Input family: statement (fixed-width text) or cqg (CSV export)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory for the text report (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--no-output-file",
        action="store_true",
        help="Do not write the text report file",
    )
    parser.add_argument(
        "--export-csv",
        type=Path,
        default=None,
        help="Also export every round trip to this CSV file",
    )
    parser.add_argument(
        "--malformed-policy",
        choices=[p.value for p in MalformedRecordPolicy],
        default=None,
        help="Override what happens to unparsable rows (default: fail for statements, skip for CQG)",
    )
    parser.add_argument(
        "--show-rules",
        action="store_true",
        help="Display information about the matching rule and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "NONE"],
        default="NONE",
        help="Set logging level",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for round-trip reporting."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.log_level)

    try:
        config_manager = RoundTripConfigManager()
        report_type = (
            ReportType(args.report_type)
            if args.report_type
            else config_manager.matching_config.default_report_type
        )
        if args.malformed_policy:
            policy = MalformedRecordPolicy(args.malformed_policy)
            config_manager = config_manager.with_overrides(
                statement_malformed_policy=policy, cqg_malformed_policy=policy
            )

        engine = RoundTripReportEngine(config_manager)

        # Show rules if requested
        if args.show_rules:
            engine.show_rules()
            return

        paths = list(args.files) or discover_input_files(args.input_dir, report_type)
        if not paths:
            logger.error(f"No {report_type.value} files found in '{args.input_dir}'")
            engine.display.show_error(f"No files found in the {args.input_dir} directory.")
            sys.exit(1)

        aggregator = engine.run(
            paths,
            report_type,
            output_dir=None if args.no_output_file else args.output_dir,
            export_csv=args.export_csv,
        )

        logger.info(f"Report run completed: {aggregator.get_processing_summary()}")
        if aggregator.has_failures:
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Report run interrupted by user")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Fatal error during report run: {e}. Please check the configuration and input files.")
        sys.exit(1)


if __name__ == "__main__":
    main()
