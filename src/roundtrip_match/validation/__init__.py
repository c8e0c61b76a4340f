"""Error types for round-trip report processing."""

from .exceptions import (
    RoundTripError,
    ContractNotFoundError,
    MalformedRecordError,
    UnbalancedOperationsError,
)

__all__ = [
    "RoundTripError",
    "ContractNotFoundError",
    "MalformedRecordError",
    "UnbalancedOperationsError",
]
