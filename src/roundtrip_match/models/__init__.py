"""Round-trip match models module."""

from .contract import ContractSpec
from .operation import Operation, Side, SequenceKey
from .round_trip import RoundTripOperation
from .report import ReportSummary, ReportResult

__all__ = [
    "ContractSpec",
    "Operation",
    "Side",
    "SequenceKey",
    "RoundTripOperation",
    "ReportSummary",
    "ReportResult",
]
