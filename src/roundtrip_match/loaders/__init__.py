"""Report loaders producing canonical Operation lists."""

from .base_loader import BaseReportLoader
from .statement_loader import StatementTextLoader
from .cqg_csv_loader import CQGCSVLoader

__all__ = ["BaseReportLoader", "StatementTextLoader", "CQGCSVLoader"]
