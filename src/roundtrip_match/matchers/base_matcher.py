"""Base matcher shared by round-trip matching rules."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence
import logging

from ..config import RoundTripConfigManager

if TYPE_CHECKING:
    from ..models import Operation, RoundTripOperation

# Module logger
logger = logging.getLogger(__name__)


class BaseMatcher(ABC):
    """Base class for round-trip matchers."""

    def __init__(self, config_manager: RoundTripConfigManager):
        """Initialize base matcher with config manager."""
        self.config_manager = config_manager
        self.decimal_precision = config_manager.get_decimal_precision()

    @staticmethod
    def sort_operations(operations: Sequence["Operation"]) -> List["Operation"]:
        """Order operations oldest first by their sequence key.

        The sort is stable, so operations with equal keys keep input order.
        """
        return sorted(operations, key=lambda op: op.sequence_key)

    @abstractmethod
    def find_round_trips(
        self, operations: Sequence["Operation"], source_name: Optional[str] = None
    ) -> list["RoundTripOperation"]:
        """Match a complete batch of operations. Must be implemented by subclasses.

        Args:
            operations: Every operation of one report
            source_name: Report name used in error messages

        Returns:
            List of round trips in the order they were produced
        """
        pass

    @abstractmethod
    def get_rule_info(self) -> Dict[str, Any]:
        """Get information about this matching rule."""
        pass
