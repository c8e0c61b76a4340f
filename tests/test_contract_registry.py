from decimal import Decimal

import pytest

from roundtrip_match.core import ContractRegistry
from roundtrip_match.validation import ContractNotFoundError

from conftest import TEST_CONTRACT


def test_configured_contracts(registry):
    assert registry.symbols() == ["M2K", "MYM"]

    m2k = registry.get("M2K")
    assert m2k.tick_size == Decimal("0.1")
    assert m2k.tick_value == Decimal("0.5")
    assert m2k.fee_per_contract == Decimal("0.62")

    mym = registry.get("MYM")
    assert mym.tick_size == Decimal("1")
    assert mym.market == "CBOT"


@pytest.mark.parametrize(
    "description, symbol",
    [
        ("M2K SEP24", "M2K"),
        ("  MYM DEC24 CBOT", "MYM"),
        ("F.US.M2KU24", "M2K"),
        ("F.US.MYMZ24", "MYM"),
    ],
)
def test_resolve_uses_symbol_in_first_word(registry, description, symbol):
    assert registry.resolve(description).symbol == symbol


@pytest.mark.parametrize("description", ["ES SEP24", "MICRO M2K", "", "   ", None])
def test_unmapped_contracts_raise(registry, description):
    with pytest.raises(ContractNotFoundError) as excinfo:
        registry.resolve(description)

    assert "Contract not yet mapped" in str(excinfo.value)
    assert excinfo.value.description == description


def test_first_registered_symbol_wins():
    registry = ContractRegistry(
        {
            "TST": TEST_CONTRACT,
            "ST": TEST_CONTRACT.model_copy(update={"symbol": "ST"}),
        }
    )

    assert registry.resolve("TSTZ24").symbol == "TST"
    assert registry.get("missing") is None
