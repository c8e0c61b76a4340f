"""Configuration manager for the round-trip report engine."""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict

from .json_types import (
    ContractEntry,
    ContractTable,
    CQGLayout,
    DateFormats,
    NormalizerConfig,
    StatementLayout,
)


class ReportType(str, Enum):
    """Input report families."""

    STATEMENT = "statement"  # Fixed-width Purchase & Sale rows (AMP Futures)
    CQG = "cqg"  # CQG order history CSV export


class MalformedRecordPolicy(str, Enum):
    """What a loader does with a row it cannot parse."""

    SKIP = "skip"
    FAIL = "fail"


class MatchingConfig(BaseModel):
    """Configuration for round-trip matching and reporting.

    Contains the per-family malformed record policies, arithmetic precision
    and output naming.
    """

    model_config = ConfigDict(
        frozen=True,
        validate_assignment=True,  # Immutable configuration
    )

    default_report_type: ReportType = Field(
        default=ReportType.CQG,
        description="Report family used when none is given on the command line",
    )

    statement_malformed_policy: MalformedRecordPolicy = Field(
        default=MalformedRecordPolicy.FAIL,
        description="Fixed-width statements abort on the first unparsable row",
    )
    cqg_malformed_policy: MalformedRecordPolicy = Field(
        default=MalformedRecordPolicy.SKIP,
        description="CQG exports skip rows that do not parse",
    )

    decimal_precision: int = Field(
        default=28, ge=1, description="Significant digits for round-trip arithmetic"
    )

    output_file_prefix: str = Field(default="Output_For_")
    output_timestamp_format: str = Field(default="%Y%m%d%H%M%S")


class RoundTripConfigManager:
    """Manages configuration for the round-trip report engine.

    Loads configuration from JSON files and provides a unified interface
    for accessing layouts, mappings and the contract table.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        matching_config: Optional[MatchingConfig] = None,
    ):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config directory. Defaults to this module's dir.
            matching_config: Optional matching config. Defaults to MatchingConfig().
        """
        if config_path is None:
            config_path = Path(__file__).parent

        self.config_path = config_path
        self.normalizer_config_path = config_path / "normalizer_config.json"
        self.contracts_path = config_path / "contracts.json"

        # Load configurations
        self._load_normalizer_config()
        self._load_contract_table()
        self.matching_config = matching_config or MatchingConfig()

    def _read_json(self, path: Path, label: str) -> dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise FileNotFoundError(f"{label} config not found at {path}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {label} config: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"{label} config must be a dictionary")
        return data

    def _load_normalizer_config(self) -> None:
        """Load normalizer configuration from JSON file."""
        data = self._read_json(self.normalizer_config_path, "Normalizer")
        for key in ("buy_sell_mappings", "statement_layout", "cqg_layout", "date_formats"):
            if key not in data:
                raise ValueError(f"Normalizer config is missing '{key}'")
        self.normalizer_config: NormalizerConfig = data  # type: ignore[assignment]

    def _load_contract_table(self) -> None:
        """Load the contract table from JSON file."""
        data: ContractTable = self._read_json(self.contracts_path, "Contracts")  # type: ignore[assignment]
        contracts = data.get("contracts")
        if not isinstance(contracts, dict) or not contracts:
            raise ValueError("Contracts config must define a non-empty 'contracts' mapping")
        self.contract_table: dict[str, ContractEntry] = contracts

    def get_buy_sell_mappings(self) -> dict[str, str]:
        """Get buy/sell value mappings (lowercase raw value -> 'Buy'/'Sell')."""
        return {k.lower(): v for k, v in self.normalizer_config["buy_sell_mappings"].items()}

    def get_statement_layout(self) -> StatementLayout:
        """Get the fixed-width statement layout."""
        return self.normalizer_config["statement_layout"]

    def get_cqg_layout(self) -> CQGLayout:
        """Get the CQG CSV layout."""
        return self.normalizer_config["cqg_layout"]

    def get_date_formats(self) -> DateFormats:
        """Get strptime formats for statement dates and fill timestamps."""
        return self.normalizer_config["date_formats"]

    def get_contract_table(self) -> dict[str, ContractEntry]:
        """Get the contract table keyed by ticker symbol (in file order)."""
        return dict(self.contract_table)

    def get_malformed_policy(self, report_type: ReportType) -> MalformedRecordPolicy:
        """Get the malformed record policy for an input family.

        Args:
            report_type: Input report family

        Returns:
            Configured policy for that family
        """
        if report_type == ReportType.STATEMENT:
            return self.matching_config.statement_malformed_policy
        elif report_type == ReportType.CQG:
            return self.matching_config.cqg_malformed_policy
        else:
            raise ValueError(f"Unknown report type: {report_type}")

    def get_decimal_precision(self) -> int:
        return self.matching_config.decimal_precision

    def with_overrides(self, **overrides: Any) -> "RoundTripConfigManager":
        """Return a manager whose matching config has the given fields replaced.

        Args:
            **overrides: MatchingConfig field values

        Returns:
            New RoundTripConfigManager reading from the same config directory
        """
        merged = self.matching_config.model_dump()
        merged.update(overrides)
        return RoundTripConfigManager(
            self.config_path, matching_config=MatchingConfig(**merged)
        )

    def reload_config(self) -> None:
        """Reload configuration from files.

        Useful for development and testing when config files change.
        """
        self._load_normalizer_config()
        self._load_contract_table()
