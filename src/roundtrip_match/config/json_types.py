"""TypedDict classes for the JSON configuration files."""

from typing import TypedDict, Union
from typing_extensions import NotRequired


class ColumnSlice(TypedDict):
    """Fixed-width column as a 0-based [start, end) slice. ``end`` null means to end of line."""

    start: int
    end: Union[int, None]


class StatementColumns(TypedDict):
    """Column layout of a Purchase & Sale row."""

    date: ColumnSlice
    trade_number: ColumnSlice
    quantity: ColumnSlice
    contract_description: ColumnSlice
    price: ColumnSlice
    currency: ColumnSlice


class StatementLayout(TypedDict):
    """Fixed-width statement layout configuration."""

    description: NotRequired[str]
    section_start_marker: str
    section_end_marker: str
    marker_occurrence: int
    columns: StatementColumns


class CQGLayout(TypedDict):
    """CQG order-history CSV layout configuration."""

    description: NotRequired[str]
    skip_rows: int
    columns: list[str]
    currency: str


class DateFormats(TypedDict):
    """strptime formats used by the normalizer."""

    statement_date: str
    fill_datetime: str
    fill_time: str


class NormalizerConfig(TypedDict):
    """Operation normalizer configuration structure."""

    buy_sell_mappings: dict[str, str]
    statement_layout: StatementLayout
    cqg_layout: CQGLayout
    date_formats: DateFormats


class ContractEntry(TypedDict):
    """One entry of contracts.json."""

    name: str
    market: str
    tick_size: str
    tick_value: str
    fee_per_contract: str


class ContractTable(TypedDict):
    """contracts.json structure: symbol -> economics."""

    description: NotRequired[str]
    contracts: dict[str, ContractEntry]
