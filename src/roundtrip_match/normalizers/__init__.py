"""Normalizers for raw trade fields."""

from .operation_normalizer import OperationNormalizer

__all__ = ["OperationNormalizer"]
