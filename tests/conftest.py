from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from roundtrip_match.config import RoundTripConfigManager
from roundtrip_match.core import ContractRegistry
from roundtrip_match.matchers import FIFOMatcher
from roundtrip_match.models import ContractSpec, Operation, Side

BASE_DATE = datetime(2024, 3, 5, 9, 30)

TEST_CONTRACT = ContractSpec(
    symbol="TST",
    name="Test contract",
    market="CME",
    tick_size=Decimal("0.1"),
    tick_value=Decimal("0.5"),
    fee_per_contract=Decimal("0.62"),
)


def make_operation(
    side: Side,
    quantity: int,
    key,
    price="100.0",
    contract: ContractSpec = TEST_CONTRACT,
    trade_number: Optional[int] = None,
) -> Operation:
    if isinstance(key, int):
        trade_number = trade_number if trade_number is not None else key
        trade_date = BASE_DATE + timedelta(minutes=key)
    else:
        trade_number = trade_number if trade_number is not None else 0
        trade_date = key
    return Operation(
        sequence_key=key,
        trade_number=trade_number,
        trade_date=trade_date,
        side=side,
        quantity=quantity,
        price=Decimal(str(price)),
        contract=contract,
        contract_description=f"{contract.symbol} MAR24",
        market=contract.market,
        currency="USD",
    )


def buy(quantity: int, key, price="100.0", **kwargs) -> Operation:
    return make_operation(Side.BUY, quantity, key, price, **kwargs)


def sell(quantity: int, key, price="100.0", **kwargs) -> Operation:
    return make_operation(Side.SELL, quantity, key, price, **kwargs)


@pytest.fixture
def config_manager() -> RoundTripConfigManager:
    return RoundTripConfigManager()


@pytest.fixture
def registry(config_manager) -> ContractRegistry:
    return ContractRegistry.from_config(config_manager)


@pytest.fixture
def matcher(config_manager) -> FIFOMatcher:
    return FIFOMatcher(config_manager)


CQG_PREAMBLE = [
    "Orders",
    "Account: 123456",
    "Exported 05/03/24",
]


def cqg_row(side, quantity, symbol, fill_price, order_hash, fill_time):
    """One order line in the 17-column CQG export layout."""
    fields = [
        "123456", "Filled", side, quantity, "0", symbol, fill_price, fill_price,
        "LMT", fill_price, "DAY", quantity, fill_time, order_hash, "trader", fill_time, "",
    ]
    return ",".join(f'"{f}"' if "," in f else f for f in fields)


def write_cqg_csv(directory, rows, name="orders.csv"):
    path = directory / name
    path.write_text("\n".join(CQG_PREAMBLE + rows) + "\n", encoding="utf-8")
    return path
