"""Round-trip matchers."""

from .base_matcher import BaseMatcher
from .fifo_matcher import FIFOMatcher

__all__ = ["BaseMatcher", "FIFOMatcher"]
