"""Operation normalizer: turns raw field values into canonical Operations."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
import logging
import pandas as pd

from ..config import RoundTripConfigManager
from ..core import ContractRegistry
from ..models import Operation, SequenceKey, Side

logger = logging.getLogger(__name__)


class OperationNormalizer:
    """Normalizes raw trade fields from statements and CSV exports."""

    def __init__(
        self,
        config_manager: RoundTripConfigManager,
        registry: Optional[ContractRegistry] = None,
    ):
        """Initialize normalizer with configuration.

        Args:
            config_manager: Configuration manager with normalization rules
            registry: Contract registry. Built from config if None.
        """
        self.config_manager = config_manager
        self.registry = registry or ContractRegistry.from_config(config_manager)
        self._buy_sell_mappings = config_manager.get_buy_sell_mappings()
        self._date_formats = config_manager.get_date_formats()

        logger.info("Initialized operation normalizer")

    @staticmethod
    def is_missing(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return value.strip() == ""
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            return False

    def normalize_side(self, value: Any) -> Optional[Side]:
        """Normalize a buy/sell indicator using case-insensitive mapping.

        Args:
            value: Raw buy/sell value (e.g., "BUY", "S")

        Returns:
            Side, or None for unrecognised values
        """
        if self.is_missing(value):
            return None

        value_clean = str(value).strip().lower()

        if value_clean in self._buy_sell_mappings:
            return Side(self._buy_sell_mappings[value_clean])

        # Fallback: first character
        first_char = value_clean[0]
        if first_char == "b":
            return Side.BUY
        if first_char == "s":
            return Side.SELL

        logger.error(f"Unable to normalize buy/sell value: '{value}' - invalid value")
        return None

    def normalize_price(self, price: Any) -> Optional[Decimal]:
        """Normalize price to Decimal.

        A comma is read as the decimal separator (CQG exports "2050,3").

        Args:
            price: Raw price value (string, int, float, Decimal or NaN)

        Returns:
            Price as Decimal, or None if missing or invalid
        """
        if self.is_missing(price):
            return None

        if isinstance(price, Decimal):
            return price

        try:
            cleaned = str(price).strip().replace('"', "").replace("'", "").replace(",", ".")
            normalized = Decimal(cleaned)
        except (ValueError, TypeError, InvalidOperation) as e:
            logger.error(f"Unable to process price value '{price}': {e}")
            return None

        if not normalized.is_finite():
            logger.error(f"Price value '{price}' is not a finite number")
            return None
        return normalized

    def normalize_quantity(self, quantity: Any) -> Optional[int]:
        """Normalize quantity to a positive integer.

        Args:
            quantity: Raw quantity value

        Returns:
            Quantity as int, or None if missing, fractional, zero or negative
        """
        if self.is_missing(quantity):
            return None

        try:
            value = Decimal(str(quantity).strip().replace(",", ""))
        except (ValueError, TypeError, InvalidOperation):
            logger.error(f"Unable to process quantity value '{quantity}'")
            return None

        if not value.is_finite() or value != value.to_integral_value() or value <= 0:
            logger.error(f"Quantity must be a positive whole number, got '{quantity}'")
            return None
        return int(value)

    def normalize_trade_number(self, value: Any) -> Optional[int]:
        """Normalize a trade number or order hash to int."""
        if self.is_missing(value):
            return None
        try:
            return int(str(value).strip())
        except ValueError:
            logger.error(f"Unable to process trade number '{value}'")
            return None

    def parse_statement_date(self, text: Any) -> Optional[datetime]:
        """Parse a statement trade date such as ``05-Mar-24``."""
        if self.is_missing(text):
            return None
        try:
            return datetime.strptime(str(text).strip(), self._date_formats["statement_date"])
        except ValueError:
            logger.error(f"Unable to parse statement date '{text}'")
            return None

    def parse_fill_time(self, text: Any, today: Optional[date] = None) -> Optional[datetime]:
        """Parse a CQG fill time.

        Full timestamps (``dd/mm/yy HH:MM:SS``) are used as is. A bare time of day
        is placed on ``today`` (defaults to the current date).

        Args:
            text: Raw fill time
            today: Date for bare times of day

        Returns:
            Fill datetime, or None if neither format matches
        """
        if self.is_missing(text):
            return None

        cleaned = str(text).strip()
        try:
            return datetime.strptime(cleaned, self._date_formats["fill_datetime"])
        except ValueError:
            pass

        try:
            time_of_day = datetime.strptime(cleaned, self._date_formats["fill_time"]).time()
        except ValueError:
            logger.error(f"Unable to parse the date time of fill '{text}'")
            return None

        return datetime.combine(today or date.today(), time_of_day)

    def build_operation(
        self,
        *,
        sequence_key: SequenceKey,
        trade_number: int,
        trade_date: datetime,
        side: Side,
        quantity: int,
        price: Decimal,
        contract_description: str,
        currency: str,
    ) -> Operation:
        """Create an Operation, resolving its contract through the registry.

        Raises:
            ContractNotFoundError: If the contract description is not registered
        """
        contract = self.registry.resolve(contract_description)
        return Operation(
            sequence_key=sequence_key,
            trade_number=trade_number,
            trade_date=trade_date,
            side=side,
            quantity=quantity,
            price=price,
            contract=contract,
            contract_description=contract_description,
            market=contract.market,
            currency=currency,
        )
