"""Contract registry: resolves instrument descriptions to contract economics."""

from decimal import Decimal
from typing import Dict, List, Optional
import logging

from ..config import RoundTripConfigManager
from ..models import ContractSpec
from ..validation import ContractNotFoundError

logger = logging.getLogger(__name__)


class ContractRegistry:
    """Closed lookup table of contracts keyed by ticker symbol.

    Descriptions are resolved on their first word: the first registered symbol
    contained in that word wins, so both ``M2K SEP24`` (statement) and
    ``F.US.M2KU24`` (CQG) resolve to M2K.
    """

    def __init__(self, contracts: Dict[str, ContractSpec]):
        """Initialize the registry.

        Args:
            contracts: Mapping of ticker symbol to contract economics (lookup order kept)
        """
        self._contracts: Dict[str, ContractSpec] = dict(contracts)
        logger.info(f"Initialized contract registry with {len(self._contracts)} contracts")

    @classmethod
    def from_config(cls, config_manager: RoundTripConfigManager) -> "ContractRegistry":
        """Build the registry from the contracts.json table.

        Args:
            config_manager: Configuration manager holding the contract table

        Returns:
            ContractRegistry with one ContractSpec per table entry
        """
        contracts: Dict[str, ContractSpec] = {}
        for symbol, entry in config_manager.get_contract_table().items():
            contracts[symbol] = ContractSpec(
                symbol=symbol,
                name=entry["name"],
                market=entry["market"],
                tick_size=Decimal(str(entry["tick_size"])),
                tick_value=Decimal(str(entry["tick_value"])),
                fee_per_contract=Decimal(str(entry["fee_per_contract"])),
            )
        return cls(contracts)

    def resolve(self, description: Optional[str]) -> ContractSpec:
        """Resolve a contract description to its economics.

        Args:
            description: Contract text from the input (e.g., "M2K SEP24")

        Returns:
            The matching ContractSpec

        Raises:
            ContractNotFoundError: If the description is empty or no symbol matches
        """
        words = (description or "").split()
        if not words:
            raise ContractNotFoundError(
                "Contract not yet mapped: empty description", description=description
            )

        first_word = words[0]
        for symbol, contract in self._contracts.items():
            if symbol in first_word:
                logger.debug(f"Resolved contract '{description}' -> {symbol}")
                return contract

        raise ContractNotFoundError("Contract not yet mapped", description=description)

    def get(self, symbol: str) -> Optional[ContractSpec]:
        """Get a contract by exact ticker symbol."""
        return self._contracts.get(symbol)

    def symbols(self) -> List[str]:
        return list(self._contracts)
