"""Core components for round-trip report processing."""

from .contract_registry import ContractRegistry
from .operation_queues import PendingOperationQueues
from .report_aggregator import ReportAggregator

__all__ = ["ContractRegistry", "PendingOperationQueues", "ReportAggregator"]
