from datetime import datetime
from decimal import Decimal

import pytest

from roundtrip_match.config import MalformedRecordPolicy
from roundtrip_match.loaders import StatementTextLoader
from roundtrip_match.models import Side
from roundtrip_match.normalizers import OperationNormalizer
from roundtrip_match.validation import ContractNotFoundError, MalformedRecordError


def statement_row(trade_date, trade_number, side, quantity, description, price, currency="USD"):
    """Lay out one Purchase & Sale row in the fixed-width statement columns."""
    quantity_block = str(quantity).ljust(11) if side == "B" else str(quantity).rjust(11)
    return (
        trade_date.ljust(9)
        + "  "
        + str(trade_number).rjust(9)
        + " "
        + "CME".ljust(16)
        + quantity_block
        + " "
        + description.ljust(36)
        + " " * 15
        + price.rjust(7)
        + " " * 4
        + currency
    )


def statement_text(rows):
    return [
        "AMP FUTURES ACCOUNT STATEMENT",
        "DATE       DESCRIPTION                         DEBIT/CREDIT",
        "05-Mar-24  Opening balance                       1000.00",
        "           TOTAL                                 1000.00",
        "",
        "PURCHASE & SALE",
        "TRADE DATE  TRADE #   BUY   SELL  CONTRACT   PRICE   DEBIT/CREDIT",
        "",
        *rows,
        "",
        "           TOTAL P/L                              3.50",
        "05-Mar-24  9999 should not be read",
    ]


@pytest.fixture
def loader(config_manager, registry):
    return StatementTextLoader(config_manager, OperationNormalizer(config_manager, registry))


def test_row_layout_matches_columns():
    row = statement_row("05-Mar-24", 101, "B", 1, "M2K JUN24", "2050.30")

    assert row[0:9] == "05-Mar-24"
    assert row[11:20].strip() == "101"
    assert row[37] == "1"
    assert row[49:85].strip() == "M2K JUN24"
    assert row[100:107] == "2050.30"
    assert row[111:] == "USD"


def test_extracts_only_the_purchase_and_sale_table(loader):
    rows = [
        statement_row("05-Mar-24", 101, "B", 1, "M2K JUN24", "2050.30"),
        statement_row("05-Mar-24", 102, "S", 1, "M2K JUN24", "2051.00"),
    ]

    table = loader.extract_purchase_sale_lines(statement_text(rows))

    assert [line for _, line in table] == rows
    assert [n for n, _ in table] == [0, 1]


def test_load_lines_builds_operations(loader):
    rows = [
        statement_row("05-Mar-24", 101, "B", 2, "M2K JUN24", "2050.30"),
        statement_row("06-Mar-24", 102, "S", 2, "M2K JUN24", "2051.00"),
    ]

    bought, sold = loader.load_lines(statement_text(rows), source_name="statement.txt")

    assert bought.side is Side.BUY
    assert bought.quantity == 2
    assert bought.trade_number == 101
    assert bought.sequence_key == 101
    assert bought.trade_date == datetime(2024, 3, 5)
    assert bought.price == Decimal("2050.30")
    assert bought.contract.symbol == "M2K"
    assert bought.contract_description == "M2K JUN24"
    assert bought.currency == "USD"

    assert sold.side is Side.SELL
    assert sold.quantity == 2
    assert sold.trade_date == datetime(2024, 3, 6)


def test_statement_round_trip_end_to_end(loader, matcher):
    rows = [
        statement_row("05-Mar-24", 101, "B", 1, "M2K JUN24", "2050.30"),
        statement_row("05-Mar-24", 102, "S", 1, "M2K JUN24", "2051.00"),
    ]

    [rt] = matcher.find_round_trips(loader.load_lines(statement_text(rows)))

    assert rt.ticks == Decimal("7")
    assert rt.profit_loss == Decimal("3.5")
    assert rt.fees == Decimal("1.24")
    assert rt.profit_loss_including_fees == Decimal("2.26")


def test_load_reads_file(loader, tmp_path):
    rows = [statement_row("05-Mar-24", 5, "S", 1, "MYM JUN24", "38000")]
    path = tmp_path / "statement.txt"
    path.write_text("\n".join(statement_text(rows)), encoding="utf-8")

    [op] = loader.load(path)

    assert op.side is Side.SELL
    assert op.contract.symbol == "MYM"


def test_missing_file(loader, tmp_path):
    with pytest.raises(FileNotFoundError):
        loader.load(tmp_path / "missing.txt")


def test_statement_without_table_has_no_operations(loader):
    assert loader.load_lines(["nothing", "to see", "here"]) == []


def test_malformed_row_fails_by_default(loader):
    rows = [statement_row("5th March", 101, "B", 1, "M2K JUN24", "2050.30")]

    with pytest.raises(MalformedRecordError) as excinfo:
        loader.load_lines(statement_text(rows), source_name="statement.txt")

    assert excinfo.value.field == "date"
    assert excinfo.value.row_number == 0
    assert excinfo.value.source_name == "statement.txt"


def test_short_row_is_malformed(loader):
    with pytest.raises(MalformedRecordError) as excinfo:
        loader.load_lines(statement_text(["05-Mar-24  101 truncated"]))

    assert excinfo.value.field == "quantity"


def test_malformed_rows_can_be_skipped(config_manager, registry):
    loader = StatementTextLoader(
        config_manager,
        OperationNormalizer(config_manager, registry),
        malformed_policy=MalformedRecordPolicy.SKIP,
    )
    rows = [
        statement_row("05-Mar-24", 101, "B", 1, "M2K JUN24", "2050.30"),
        statement_row("05-Mar-24", 102, "S", 1, "M2K JUN24", "bad"),
        statement_row("05-Mar-24", 103, "S", 1, "M2K JUN24", "2051.00"),
    ]

    operations = loader.load_lines(statement_text(rows))

    assert [op.trade_number for op in operations] == [101, 103]


def test_unknown_contract_is_always_fatal(config_manager, registry):
    loader = StatementTextLoader(
        config_manager,
        OperationNormalizer(config_manager, registry),
        malformed_policy=MalformedRecordPolicy.SKIP,
    )
    rows = [statement_row("05-Mar-24", 101, "B", 1, "ES JUN24", "5100.25")]

    with pytest.raises(ContractNotFoundError):
        loader.load_lines(statement_text(rows))
