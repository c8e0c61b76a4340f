"""Command line display and report rendering."""

from .display import RoundTripDisplay
from .text_report import TextReportRenderer

__all__ = ["RoundTripDisplay", "TextReportRenderer"]
