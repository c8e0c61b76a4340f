import pytest

from roundtrip_match.core import PendingOperationQueues
from roundtrip_match.models import Side

from conftest import buy, sell


def test_heads_are_oldest_per_side():
    queues = PendingOperationQueues()
    b1, b2, s1 = buy(1, 1), buy(1, 2), sell(1, 3)
    for op in (b1, b2, s1):
        queues.append(op)

    assert queues.has_pair()
    assert queues.heads() == (b1, s1)
    assert queues.pending(Side.BUY) == [b1, b2]
    assert queues.pending_quantity(Side.BUY) == 2


def test_heads_need_both_sides():
    queues = PendingOperationQueues()
    queues.append(buy(1, 1))

    assert not queues.has_pair()
    with pytest.raises(IndexError):
        queues.heads()


def test_release_consumed_heads():
    queues = PendingOperationQueues()
    b1, s1 = buy(2, 1), sell(1, 2)
    queues.append(b1)
    queues.append(s1)

    b1.consume(1)
    s1.consume(1)

    assert queues.release_consumed_heads() == 1
    assert queues.peek(Side.BUY) is b1
    assert queues.peek(Side.SELL) is None
    assert not queues.is_empty()

    stats = queues.get_statistics()
    assert stats["completed_count"] == 1
    assert stats["pending_buy_quantity"] == 1


def test_consumed_operation_cannot_be_queued():
    op = sell(1, 1)
    op.consume(1)

    with pytest.raises(ValueError):
        PendingOperationQueues().append(op)
