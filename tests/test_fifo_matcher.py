from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from roundtrip_match.cli import TextReportRenderer
from roundtrip_match.core import PendingOperationQueues
from roundtrip_match.models import Side
from roundtrip_match.validation import UnbalancedOperationsError

from conftest import buy, sell


def test_long_round_trip_figures(matcher):
    opening = buy(2, 1, "100.0")
    closing = sell(2, 2, "100.5")

    [rt] = matcher.find_round_trips([opening, closing])

    assert rt.side is Side.BUY
    assert rt.quantity == 2
    assert rt.ticks == Decimal("10")
    assert rt.profit_loss == Decimal("5.0")
    assert rt.fees == Decimal("2.48")
    assert rt.profit_loss_including_fees == Decimal("2.52")
    assert rt.entry_price == Decimal("100.0")
    assert rt.exit_price == Decimal("100.5")


def test_short_round_trip_when_sell_comes_first(matcher):
    opening = sell(5, 1, "200.0")
    closing = buy(5, 2, "199.0")

    [rt] = matcher.find_round_trips([opening, closing])

    assert rt.side is Side.SELL
    assert rt.open_operation is opening
    assert rt.close_operation is closing
    assert rt.buy_operation is closing
    assert rt.sell_operation is opening
    assert rt.ticks == Decimal("50")
    assert rt.profit_loss == Decimal("25.0")


def test_losing_short_has_negative_ticks(matcher):
    [rt] = matcher.find_round_trips([sell(1, 1, "100.0"), buy(1, 2, "100.3")])

    assert rt.ticks == Decimal("-3")
    assert rt.profit_loss == Decimal("-1.5")
    assert not rt.is_winner


def test_equal_sequence_keys_open_with_the_buy(matcher):
    fill_time = datetime(2024, 3, 5, 10, 0, 0)
    the_sell = sell(1, fill_time, "100.0")
    the_buy = buy(1, fill_time, "100.2")

    [rt] = matcher.find_round_trips([the_sell, the_buy])

    assert rt.side is Side.BUY
    assert rt.open_operation is the_buy
    assert rt.ticks == Decimal("-2")


def test_input_order_does_not_matter(matcher):
    operations = [sell(1, 3, "101.0"), buy(1, 1, "100.0")]

    [rt] = matcher.find_round_trips(operations)

    assert rt.side is Side.BUY
    assert rt.entry_price == Decimal("100.0")


def test_partial_fill_is_split_across_round_trips(matcher):
    big_buy = buy(3, 1, "100.0")
    first_sell = sell(1, 2, "100.1")
    second_sell = sell(2, 3, "100.2")

    round_trips = matcher.find_round_trips([big_buy, first_sell, second_sell])

    assert [rt.quantity for rt in round_trips] == [1, 2]
    assert all(rt.buy_operation is big_buy for rt in round_trips)
    assert round_trips[0].sell_operation is first_sell
    assert round_trips[1].sell_operation is second_sell
    assert [rt.ticks for rt in round_trips] == [Decimal("1"), Decimal("4")]
    assert big_buy.remaining_quantity == 0
    assert first_sell.is_consumed and second_sell.is_consumed


def test_oldest_buy_is_matched_first(matcher):
    b1 = buy(1, 1, "100.0")
    b2 = buy(2, 2, "101.0")
    s1 = sell(2, 3, "102.0")
    queues = PendingOperationQueues()

    round_trips = list(matcher.iter_round_trips([b1, b2, s1], queues))

    assert [rt.buy_operation for rt in round_trips] == [b1, b2]
    assert [rt.quantity for rt in round_trips] == [1, 1]
    assert round_trips[0].buy_operation is b1
    assert queues.peek(Side.BUY) is b2
    assert b2.remaining_quantity == 1
    assert queues.peek(Side.SELL) is None


def test_position_flip_opens_new_round_trip_with_other_side(matcher):
    b1 = buy(1, 1, "100.0")
    s1 = sell(2, 2, "101.0")
    b2 = buy(1, 3, "100.5")

    round_trips = matcher.find_round_trips([b1, s1, b2])

    assert [rt.side for rt in round_trips] == [Side.BUY, Side.SELL]
    assert round_trips[1].open_operation is s1
    assert round_trips[1].close_operation is b2
    assert round_trips[1].ticks == Decimal("5")


def test_contract_comes_from_opening_leg(matcher, registry):
    m2k = registry.get("M2K")
    opening = buy(1, 1, "2050.0", contract=m2k)
    closing = sell(1, 2, "2050.5", contract=m2k)

    [rt] = matcher.find_round_trips([opening, closing])

    assert rt.contract is m2k
    assert rt.ticks == Decimal("5")
    assert rt.profit_loss == Decimal("2.5")
    assert rt.fees == Decimal("1.24")


def test_empty_input_gives_no_round_trips(matcher):
    assert matcher.find_round_trips([]) == []


def test_unbalanced_operations_raise_with_pending_legs(matcher):
    b1 = buy(3, 1)
    s1 = sell(1, 2)

    with pytest.raises(UnbalancedOperationsError) as excinfo:
        matcher.find_round_trips([b1, s1], source_name="report.csv")

    error = excinfo.value
    assert error.pending_buys == [b1]
    assert error.pending_sells == []
    assert error.unmatched_buy_quantity == 2
    assert error.unmatched_sell_quantity == 0
    assert error.source_name == "report.csv"
    assert "report.csv" in str(error)


def test_only_sells_is_unbalanced(matcher):
    with pytest.raises(UnbalancedOperationsError) as excinfo:
        matcher.find_round_trips([sell(1, 1), sell(2, 2)])

    assert excinfo.value.unmatched_sell_quantity == 3


def test_operations_can_only_be_matched_once(matcher):
    operations = [buy(1, 1), sell(1, 2)]
    matcher.find_round_trips(operations)

    with pytest.raises(ValueError, match="already matched"):
        matcher.find_round_trips(operations)


def test_round_trip_is_immutable(matcher):
    [rt] = matcher.find_round_trips([buy(1, 1), sell(1, 2)])

    with pytest.raises(ValidationError):
        rt.quantity = 5


def test_rule_info_describes_fifo(matcher):
    info = matcher.get_rule_info()

    assert info["match_type"] == "fifo"
    assert info["requirements"]


def test_fifo_order_leaves_younger_buy_pending(matcher):
    b1 = buy(3, 1)
    b2 = buy(2, 2)
    s1 = sell(4, 3)
    queues = PendingOperationQueues()

    round_trips = list(matcher.iter_round_trips([b1, b2, s1], queues))

    assert [(rt.buy_operation, rt.sell_operation, rt.quantity) for rt in round_trips] == [
        (b1, s1, 3),
        (b2, s1, 1),
    ]
    assert queues.pending(Side.BUY) == [b2]
    assert b2.remaining_quantity == 1

    with pytest.raises(UnbalancedOperationsError):
        matcher.find_round_trips([buy(3, 1), buy(2, 2), sell(4, 3)])


def test_whole_number_prices_give_plain_tick_counts(matcher, registry, config_manager):
    m2k = registry.get("M2K")
    [rt] = matcher.find_round_trips(
        [buy(1, 1, "2050", contract=m2k), sell(1, 2, "2060", contract=m2k)]
    )

    assert str(rt.ticks) == "100"
    assert str(rt.profit_loss) == "50.0"
    assert str(rt.fees) == "1.24"

    block = TextReportRenderer(config_manager).render_round_trip(rt)
    assert "Ticks: 100" in block.splitlines()
