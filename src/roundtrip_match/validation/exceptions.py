"""Custom exceptions for round-trip report processing."""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import Operation


class RoundTripError(Exception):
    """
    Base exception for report processing errors.

    Provides structured error information for debugging and reporting.
    """

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize RoundTripError with detailed error information.

        Args:
            message: Human-readable error message
            source_name: Name of the report/file being processed
            details: Additional structured details
        """
        super().__init__(message)
        self.source_name = source_name
        self.details = details or {}

    def __str__(self) -> str:
        """Return detailed error message."""
        parts = [str(self.args[0]) if self.args else "Round trip error"]

        if self.source_name:
            parts.append(f"Source: {self.source_name}")

        if self.details:
            parts.append(f"Details: {self.details}")

        return " | ".join(parts)


class ContractNotFoundError(RoundTripError):
    """Raised when a contract description has no registry entry."""

    def __init__(self, message: str, description: Optional[str] = None, **kwargs):
        """
        Initialize contract lookup error.

        Args:
            message: Error message
            description: The contract description that could not be resolved
            **kwargs: Additional arguments passed to RoundTripError
        """
        super().__init__(message, **kwargs)
        self.description = description

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.description is not None:
            return f"{base_msg} | Contract: '{self.description}'"
        return base_msg


class MalformedRecordError(RoundTripError):
    """Raised when an input row cannot be parsed into an operation."""

    def __init__(
        self,
        message: str,
        row_number: Optional[int] = None,
        raw_record: Optional[Any] = None,
        field: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize malformed record error.

        Args:
            message: Error message
            row_number: Row number (0-based) inside the input table
            raw_record: The raw line or row values
            field: Field that failed to parse
            **kwargs: Additional arguments passed to RoundTripError
        """
        super().__init__(message, **kwargs)
        self.row_number = row_number
        self.raw_record = raw_record
        self.field = field

    def __str__(self) -> str:
        base_msg = super().__str__()

        parts = [base_msg]
        if self.row_number is not None:
            parts.append(f"Row: {self.row_number}")
        if self.field:
            parts.append(f"Field: {self.field}")
        if self.raw_record is not None:
            parts.append(f"Record: {self.raw_record!r}")

        return " | ".join(parts)


class UnbalancedOperationsError(RoundTripError):
    """Raised when buy and sell quantities do not net out after matching.

    The matcher never hands back a partial round-trip list; the residual
    operations are attached instead so the caller can report them.
    """

    def __init__(
        self,
        message: str,
        pending_buys: Optional[List["Operation"]] = None,
        pending_sells: Optional[List["Operation"]] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.pending_buys = list(pending_buys or [])
        self.pending_sells = list(pending_sells or [])

    @property
    def unmatched_buy_quantity(self) -> int:
        return sum(op.remaining_quantity for op in self.pending_buys)

    @property
    def unmatched_sell_quantity(self) -> int:
        return sum(op.remaining_quantity for op in self.pending_sells)

    def __str__(self) -> str:
        base_msg = super().__str__()
        return (
            f"{base_msg} | Unmatched buy quantity: {self.unmatched_buy_quantity}"
            f" | Unmatched sell quantity: {self.unmatched_sell_quantity}"
        )
