"""Futures round-trip matching and P/L reporting."""

from .models import ContractSpec, Operation, Side, RoundTripOperation, ReportSummary, ReportResult
from .matchers import FIFOMatcher
from .config import RoundTripConfigManager, ReportType, MalformedRecordPolicy
from .core import ContractRegistry, ReportAggregator
from .loaders import StatementTextLoader, CQGCSVLoader
from .normalizers import OperationNormalizer
from .cli import RoundTripDisplay, TextReportRenderer
from .validation import (
    RoundTripError,
    ContractNotFoundError,
    MalformedRecordError,
    UnbalancedOperationsError,
)

__version__ = "0.1.0"
__all__ = [
    "ContractSpec",
    "Operation",
    "Side",
    "RoundTripOperation",
    "ReportSummary",
    "ReportResult",
    "FIFOMatcher",
    "RoundTripConfigManager",
    "ReportType",
    "MalformedRecordPolicy",
    "ContractRegistry",
    "ReportAggregator",
    "StatementTextLoader",
    "CQGCSVLoader",
    "OperationNormalizer",
    "RoundTripDisplay",
    "TextReportRenderer",
    "RoundTripError",
    "ContractNotFoundError",
    "MalformedRecordError",
    "UnbalancedOperationsError",
]
