"""CSV loader for CQG order history exports."""

from datetime import date
from pathlib import Path
from typing import List, Optional
import logging
import pandas as pd

from ..config import MalformedRecordPolicy, ReportType
from ..models import Operation
from ..validation import MalformedRecordError
from .base_loader import BaseReportLoader

logger = logging.getLogger(__name__)


class CQGCSVLoader(BaseReportLoader):
    """Loads and normalizes CQG order history rows.

    The export has three preamble rows and no header; columns are positional
    (see ``cqg_layout`` in normalizer_config.json). Operations are keyed by
    fill time.
    """

    report_type = ReportType.CQG

    def __init__(self, *args, today: Optional[date] = None, **kwargs):
        """Initialize CQG loader.

        Args:
            today: Date for fill times that carry no date. Defaults to the current date.
        """
        super().__init__(*args, **kwargs)
        self.layout = self.config_manager.get_cqg_layout()
        self.today = today
        logger.info("Initialized CQG CSV loader")

    def load(self, path: Path) -> List[Operation]:
        """Load operations from a CQG CSV file.

        Args:
            path: Path to the CSV export

        Returns:
            Operations in file order

        Raises:
            FileNotFoundError: If the CSV file doesn't exist
            MalformedRecordError: If the file or a row is malformed and the policy is FAIL
            ContractNotFoundError: If a row's symbol is not registered
        """
        logger.info(f"Loading CQG CSV from: {path}")
        if not path.exists():
            raise FileNotFoundError(f"CQG CSV file not found: {path}")

        on_bad_lines = "skip" if self.malformed_policy == MalformedRecordPolicy.SKIP else "error"
        try:
            df = pd.read_csv(
                path,
                header=None,
                skiprows=self.layout["skip_rows"],
                skip_blank_lines=True,
                dtype=str,
                encoding="utf-8-sig",
                on_bad_lines=on_bad_lines,
            )
        except pd.errors.EmptyDataError:
            logger.warning(f"CQG CSV {path} has no order rows")
            return []
        except pd.errors.ParserError as e:
            raise MalformedRecordError(
                f"Invalid CQG CSV format: {e}", source_name=path.name
            ) from e

        logger.info(f"Loaded {len(df)} rows from CQG CSV")
        return self.from_dataframe(df, source_name=path.name)

    def from_dataframe(self, df: pd.DataFrame, source_name: Optional[str] = None) -> List[Operation]:
        """Create operations from a DataFrame of CQG rows.

        Positional frames (integer column labels, as read from the export) are
        labelled with the configured column names; labelled frames only have
        their names normalized.

        Args:
            df: CQG rows
            source_name: Report name used in error messages

        Returns:
            List of operations
        """
        if df.empty:
            logger.warning("Empty DataFrame provided for CQG operations")
            return []

        df = self._label_columns(df)

        operations: List[Operation] = []
        # Enumerate over rows for guaranteed integer index
        for i, (_, row) in enumerate(df.iterrows()):
            try:
                operation = self._create_operation(row, i, source_name)
            except MalformedRecordError as e:
                self.handle_malformed(e)
                continue
            operations.append(operation)

        logger.info(f"Successfully created {len(operations)} CQG operations")
        return operations

    def _label_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy().reset_index(drop=True)
        names = self.layout["columns"]

        if all(pd.api.types.is_integer(c) for c in df.columns):
            df = df.iloc[:, : len(names)]
            df.columns = names[: len(df.columns)]
        else:
            df.columns = df.columns.str.strip().str.lower().str.replace("/", "_")

        missing = [c for c in ("b_s", "qty", "symbol", "avgfillp", "hash", "fillt") if c not in df.columns]
        if missing:
            raise MalformedRecordError(f"CQG data is missing columns: {', '.join(missing)}")
        return df

    def _create_operation(self, row: pd.Series, index: int, source_name: Optional[str]) -> Operation:
        """Create one operation from a CQG row.

        Raises:
            MalformedRecordError: If a required field does not parse
            ContractNotFoundError: If the symbol is not registered
        """
        def malformed(field: str, message: str) -> MalformedRecordError:
            return MalformedRecordError(
                message,
                row_number=index,
                raw_record=row.to_dict(),
                field=field,
                source_name=source_name,
            )

        trade_number = self.normalizer.normalize_trade_number(row.get("hash"))
        if trade_number is None:
            raise malformed("hash", "Unparsable order hash")

        quantity = self.normalizer.normalize_quantity(row.get("qty"))
        if quantity is None:
            raise malformed("qty", "Quantity must be a positive whole number")

        side = self.normalizer.normalize_side(row.get("b_s"))
        if side is None:
            raise malformed("b_s", "Unknown buy/sell value")

        price = self.normalizer.normalize_price(row.get("avgfillp"))
        if price is None:
            raise malformed("avgfillp", "Unparsable average fill price")

        fill_time = self.normalizer.parse_fill_time(row.get("fillt"), today=self.today)
        if fill_time is None:
            raise malformed("fillt", "Unable to parse the date time of fill")

        symbol = row.get("symbol")
        description = "" if self.normalizer.is_missing(symbol) else str(symbol).strip()

        return self.normalizer.build_operation(
            sequence_key=fill_time,
            trade_number=trade_number,
            trade_date=fill_time,
            side=side,
            quantity=quantity,
            price=price,
            contract_description=description,
            currency=self.layout["currency"],
        )
