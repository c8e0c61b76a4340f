"""Shared behaviour for report loaders."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
import logging

from ..config import MalformedRecordPolicy, ReportType, RoundTripConfigManager
from ..models import Operation
from ..normalizers import OperationNormalizer
from ..validation import MalformedRecordError

logger = logging.getLogger(__name__)


class BaseReportLoader(ABC):
    """Base class for loaders producing the canonical Operation list."""

    report_type: ReportType

    def __init__(
        self,
        config_manager: RoundTripConfigManager,
        normalizer: Optional[OperationNormalizer] = None,
        malformed_policy: Optional[MalformedRecordPolicy] = None,
    ):
        """Initialize loader.

        Args:
            config_manager: Configuration manager
            normalizer: Operation normalizer. Created from config if None.
            malformed_policy: Override for the configured malformed record policy
        """
        self.config_manager = config_manager
        self.normalizer = normalizer or OperationNormalizer(config_manager)
        self.malformed_policy = malformed_policy or config_manager.get_malformed_policy(
            self.report_type
        )

    def handle_malformed(self, error: MalformedRecordError) -> None:
        """Apply the malformed record policy to a row that failed to parse.

        Raises:
            MalformedRecordError: If the policy is FAIL
        """
        if self.malformed_policy == MalformedRecordPolicy.FAIL:
            logger.error(f"Malformed {self.report_type.value} record: {error}")
            raise error
        logger.warning(f"Skipping malformed {self.report_type.value} record: {error}")

    @abstractmethod
    def load(self, path: Path) -> List[Operation]:
        """Load every operation of one report file.

        Args:
            path: Input file

        Returns:
            Operations in file order
        """
        pass
