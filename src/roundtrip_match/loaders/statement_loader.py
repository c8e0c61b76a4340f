"""Loader for the fixed-width Purchase & Sale table of broker statements."""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import logging

from ..config import ReportType
from ..config.json_types import ColumnSlice
from ..models import Operation, Side
from ..validation import MalformedRecordError
from .base_loader import BaseReportLoader

logger = logging.getLogger(__name__)


def _slice(line: str, column: ColumnSlice) -> str:
    return line[column["start"]:column["end"]]


class StatementTextLoader(BaseReportLoader):
    """Parses Purchase & Sale rows from the extracted text of a statement.

    The table starts after the second line containing ``DEBIT/CREDIT`` and
    ends at the second line containing ``TOTAL``. Each row is fixed width;
    the side is read from the quantity block: a non-blank first character is
    a buy of that many contracts, otherwise the last character is the sold
    quantity. Operations are keyed by trade number.
    """

    report_type = ReportType.STATEMENT

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.layout = self.config_manager.get_statement_layout()
        self.columns = self.layout["columns"]
        logger.info("Initialized statement text loader")

    def load(self, path: Path) -> List[Operation]:
        """Load operations from a statement text file.

        Args:
            path: UTF-8 text of the statement

        Returns:
            Operations in table order

        Raises:
            FileNotFoundError: If the file doesn't exist
            MalformedRecordError: If a row is malformed and the policy is FAIL
            ContractNotFoundError: If a row's contract is not registered
        """
        logger.info(f"Loading statement text from: {path}")
        if not path.exists():
            raise FileNotFoundError(f"Statement file not found: {path}")

        text = path.read_text(encoding="utf-8")
        return self.load_lines(text.splitlines(), source_name=path.name)

    def load_lines(self, lines: Iterable[str], source_name: Optional[str] = None) -> List[Operation]:
        """Parse operations from the full text lines of a statement."""
        table_lines = self.extract_purchase_sale_lines(lines)
        logger.info(f"Found {len(table_lines)} lines in the Purchase & Sale table")

        operations: List[Operation] = []
        for row_number, line in table_lines:
            operation = self._parse_row(line, row_number, source_name)
            if operation is not None:
                operations.append(operation)

        logger.info(f"Successfully created {len(operations)} statement operations")
        return operations

    def extract_purchase_sale_lines(self, lines: Iterable[str]) -> List[Tuple[int, str]]:
        """Collect the non-blank lines of the Purchase & Sale table.

        Args:
            lines: All text lines of the statement

        Returns:
            List of (table row number, line) tuples
        """
        start_marker = self.layout["section_start_marker"]
        end_marker = self.layout["section_end_marker"]
        occurrence = self.layout["marker_occurrence"]

        start_count = 0
        end_count = 0
        collected: List[Tuple[int, str]] = []
        row_number = 0

        for line in lines:
            line = line.rstrip("\r\n")
            if end_marker in line:
                end_count += 1
                if end_count == occurrence:
                    break
            if start_count == occurrence and end_count < occurrence:
                if line.strip():
                    collected.append((row_number, line))
                    row_number += 1
            if start_marker in line:
                start_count += 1

        return collected

    def _parse_row(self, line: str, row_number: int, source_name: Optional[str]) -> Optional[Operation]:
        """Parse one fixed-width row, applying the malformed record policy."""
        try:
            fields = self._split_row(line, row_number, source_name)
        except MalformedRecordError as e:
            self.handle_malformed(e)
            return None

        trade_date, trade_number, side, quantity, description, price, currency = fields
        # Unknown contracts are always fatal
        return self.normalizer.build_operation(
            sequence_key=trade_number,
            trade_number=trade_number,
            trade_date=trade_date,
            side=side,
            quantity=quantity,
            price=price,
            contract_description=description,
            currency=currency,
        )

    def _split_row(self, line: str, row_number: int, source_name: Optional[str]):
        def malformed(field: str, message: str) -> MalformedRecordError:
            return MalformedRecordError(
                message,
                row_number=row_number,
                raw_record=line,
                field=field,
                source_name=source_name,
            )

        quantity_block = _slice(line, self.columns["quantity"])
        expected_width = self.columns["quantity"]["end"] - self.columns["quantity"]["start"]
        if len(quantity_block) != expected_width:
            raise malformed("quantity", "Row is shorter than the statement layout")

        trade_date = self.normalizer.parse_statement_date(_slice(line, self.columns["date"]))
        if trade_date is None:
            raise malformed("date", "Unparsable trade date")

        trade_number = self.normalizer.normalize_trade_number(
            _slice(line, self.columns["trade_number"])
        )
        if trade_number is None:
            raise malformed("trade_number", "Unparsable trade number")

        if quantity_block[0] != " ":
            side = Side.BUY
            quantity = self.normalizer.normalize_quantity(quantity_block[0])
        else:
            side = Side.SELL
            quantity = self.normalizer.normalize_quantity(quantity_block[-1])
        if quantity is None:
            raise malformed("quantity", f"Unparsable {side.value.lower()} quantity")

        price = self.normalizer.normalize_price(_slice(line, self.columns["price"]))
        if price is None:
            raise malformed("price", "Unparsable trade price")

        description = _slice(line, self.columns["contract_description"]).strip()
        currency = _slice(line, self.columns["currency"]).strip()

        return trade_date, trade_number, side, quantity, description, price, currency
