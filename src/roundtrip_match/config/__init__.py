"""Configuration module for round-trip report processing."""

from .config_manager import (
    MalformedRecordPolicy,
    MatchingConfig,
    ReportType,
    RoundTripConfigManager,
)

__all__ = [
    "MalformedRecordPolicy",
    "MatchingConfig",
    "ReportType",
    "RoundTripConfigManager",
]
