"""Core numerical primitives for nanonet."""

from . import activations, errors, linalg, network, types

__all__ = ["activations", "errors", "linalg", "network", "types"]
