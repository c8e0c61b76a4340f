"""Pending operation queues used by a single FIFO matching pass."""

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple
import logging

from ..models import Operation, Side

logger = logging.getLogger(__name__)


class PendingOperationQueues:
    """Holds the buys and sells that still have unmatched quantity.

    Both queues are first-in-first-out. An operation leaves its queue exactly
    when its remaining quantity reaches zero. One instance belongs to one
    matching pass and is discarded afterwards.
    """

    def __init__(self) -> None:
        self._queues: Dict[Side, Deque[Operation]] = {
            Side.BUY: deque(),
            Side.SELL: deque(),
        }
        self._enqueued_count = 0
        self._completed_count = 0

    def append(self, operation: Operation) -> None:
        """Add an operation to the back of its side's queue.

        Args:
            operation: Operation with a positive remaining quantity

        Raises:
            ValueError: If the operation has nothing left to match
        """
        if operation.is_consumed:
            raise ValueError(
                f"Operation {operation.display_id} has no remaining quantity to match"
            )
        self._queues[operation.side].append(operation)
        self._enqueued_count += 1
        logger.debug(f"Queued {operation}")

    def has_pair(self) -> bool:
        """True while both sides have a pending operation."""
        return bool(self._queues[Side.BUY]) and bool(self._queues[Side.SELL])

    def heads(self) -> Tuple[Operation, Operation]:
        """Get the oldest pending buy and sell.

        Returns:
            Tuple of (buy head, sell head)

        Raises:
            IndexError: If either queue is empty
        """
        if not self.has_pair():
            raise IndexError("Both queues must be non-empty to read their heads")
        return self._queues[Side.BUY][0], self._queues[Side.SELL][0]

    def release_consumed_heads(self) -> int:
        """Pop the heads whose remaining quantity reached zero.

        Returns:
            Number of operations removed
        """
        removed = 0
        for side, queue in self._queues.items():
            if queue and queue[0].is_consumed:
                operation = queue.popleft()
                removed += 1
                logger.debug(f"Fully matched {side.value.lower()} {operation.display_id}")
        self._completed_count += removed
        return removed

    def pending(self, side: Side) -> List[Operation]:
        """Get the operations still pending on one side, oldest first."""
        return list(self._queues[side])

    def pending_quantity(self, side: Side) -> int:
        return sum(op.remaining_quantity for op in self._queues[side])

    def is_empty(self) -> bool:
        return not self._queues[Side.BUY] and not self._queues[Side.SELL]

    def peek(self, side: Side) -> Optional[Operation]:
        queue = self._queues[side]
        return queue[0] if queue else None

    def get_statistics(self) -> Dict[str, Any]:
        """Get queue statistics for logging.

        Returns:
            Dictionary with counts and pending quantities
        """
        return {
            "enqueued_count": self._enqueued_count,
            "completed_count": self._completed_count,
            "pending_buy_count": len(self._queues[Side.BUY]),
            "pending_sell_count": len(self._queues[Side.SELL]),
            "pending_buy_quantity": self.pending_quantity(Side.BUY),
            "pending_sell_quantity": self.pending_quantity(Side.SELL),
        }
