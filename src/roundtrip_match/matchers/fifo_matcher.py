"""FIFO round-trip matching: pairs buys against sells oldest first."""

from decimal import Decimal, localcontext
from typing import Any, Dict, Iterator, List, Optional, Sequence
import logging

from ..config import RoundTripConfigManager
from ..core import PendingOperationQueues
from ..models import Operation, RoundTripOperation, Side
from ..validation import UnbalancedOperationsError
from .base_matcher import BaseMatcher

logger = logging.getLogger(__name__)


def _without_exponent(value: Decimal) -> Decimal:
    """Rescale a value like 1.0E+2 to 100 so it prints in plain notation."""
    if value.as_tuple().exponent > 0:
        return value.quantize(Decimal(1))
    return value


class FIFOMatcher(BaseMatcher):
    """Turns one report's operations into round trips.

    Operations are processed in sequence key order. Each one joins the queue
    of its side; then, while both queues hold something, the two heads are
    matched for the smaller remaining quantity and a RoundTripOperation is
    emitted. Heads whose remaining quantity reaches zero leave their queue.

    The leg with the earlier sequence key opens the round trip. When keys are
    equal the buy opens. Any quantity still pending after the last operation
    is an UnbalancedOperationsError; no partial list is returned.
    """

    def __init__(self, config_manager: RoundTripConfigManager):
        """Initialize the FIFO matcher.

        Args:
            config_manager: Configuration manager with matching settings
        """
        super().__init__(config_manager)
        logger.info(f"Initialized FIFOMatcher with decimal precision {self.decimal_precision}")

    def find_round_trips(
        self, operations: Sequence[Operation], source_name: Optional[str] = None
    ) -> List[RoundTripOperation]:
        """Match every buy unit against a sell unit, first in first out.

        Mutates ``remaining_quantity`` of the given operations.

        Args:
            operations: Complete batch of operations for one report
            source_name: Report name used in error messages

        Returns:
            Round trips in the order they were produced

        Raises:
            UnbalancedOperationsError: If buy and sell quantities do not net out
            ValueError: If an operation was already (partly) matched
        """
        logger.info(f"Starting FIFO matching of {len(operations)} operations")

        queues = PendingOperationQueues()
        round_trips = list(self.iter_round_trips(operations, queues))

        if not queues.is_empty():
            stats = queues.get_statistics()
            logger.error(
                f"Unbalanced operations: {stats['pending_buy_quantity']} buy and "
                f"{stats['pending_sell_quantity']} sell quantity left unmatched"
            )
            raise UnbalancedOperationsError(
                "Not all operations could be matched",
                pending_buys=queues.pending(Side.BUY),
                pending_sells=queues.pending(Side.SELL),
                source_name=source_name,
            )

        logger.info(f"FIFO matching completed. Produced {len(round_trips)} round trips")
        return round_trips

    def iter_round_trips(
        self, operations: Sequence[Operation], queues: PendingOperationQueues
    ) -> Iterator[RoundTripOperation]:
        """Yield round trips as operations are fed through the queues.

        Leaves whatever could not be matched in ``queues``; the balance check
        is up to the caller.

        Args:
            operations: Operations to process (sorted here by sequence key)
            queues: Pending queues for this pass

        Yields:
            One RoundTripOperation per match
        """
        for operation in self.sort_operations(operations):
            if operation.remaining_quantity != operation.quantity:
                raise ValueError(
                    f"Operation {operation.display_id} was already matched; "
                    "operations can only go through one matching pass"
                )
            queues.append(operation)

            while queues.has_pair():
                buy_operation, sell_operation = queues.heads()
                matched_quantity = min(
                    buy_operation.remaining_quantity, sell_operation.remaining_quantity
                )

                round_trip = self.create_round_trip(
                    buy_operation, sell_operation, matched_quantity
                )
                logger.debug(f"Matched {round_trip.summary_line}")

                buy_operation.consume(matched_quantity)
                sell_operation.consume(matched_quantity)
                queues.release_consumed_heads()

                yield round_trip

    def create_round_trip(
        self, buy_operation: Operation, sell_operation: Operation, quantity: int
    ) -> RoundTripOperation:
        """Build the round trip for one buy/sell pairing.

        Args:
            buy_operation: Buy leg
            sell_operation: Sell leg
            quantity: Matched quantity

        Returns:
            RoundTripOperation with ticks, P/L and fees for ``quantity`` units
        """
        if sell_operation.sequence_key < buy_operation.sequence_key:
            open_operation, close_operation = sell_operation, buy_operation
        else:
            open_operation, close_operation = buy_operation, sell_operation

        contract = open_operation.contract
        qty = Decimal(quantity)

        with localcontext() as ctx:
            ctx.prec = self.decimal_precision

            if open_operation.is_buy:
                price_move = close_operation.price - open_operation.price
            else:
                price_move = open_operation.price - close_operation.price

            ticks = _without_exponent(price_move * qty / contract.tick_size)
            profit_loss = _without_exponent(ticks * contract.tick_value)
            fees = _without_exponent(contract.fee_per_contract * qty * 2)

        return RoundTripOperation(
            side=open_operation.side,
            quantity=quantity,
            open_operation=open_operation,
            close_operation=close_operation,
            buy_operation=buy_operation,
            sell_operation=sell_operation,
            contract=contract,
            ticks=ticks,
            profit_loss=profit_loss,
            fees=fees,
        )

    def get_rule_info(self) -> Dict[str, Any]:
        """Get information about this matching rule.

        Returns:
            Dict containing rule metadata and requirements
        """
        return {
            "rule_number": 1,
            "rule_name": "FIFO Round Trip",
            "match_type": "fifo",
            "description": "Pairs buys against sells oldest first, splitting on quantity",
            "requirements": [
                "Operations are ordered by trade number (statements) or fill time (CQG)",
                "The earlier leg of a pairing opens the round trip (buy on equal keys)",
                "Ticks = price move x quantity / tick size, signed by the opening side",
                "Fees = fee per contract x quantity x 2",
                "Total buy quantity must equal total sell quantity",
            ],
        }
