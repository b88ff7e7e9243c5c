"""Exception types raised by the nanonet core."""

from __future__ import annotations


class DimensionMismatchError(ValueError):
    """Operand shapes are incompatible, or a vector disagrees with a layer size."""


class InvalidArgumentError(ValueError):
    """An argument is outside its valid domain (empty batch, non-positive size)."""


__all__ = ["DimensionMismatchError", "InvalidArgumentError"]
