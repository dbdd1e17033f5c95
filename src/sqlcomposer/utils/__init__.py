"""Utility functions and helpers for sqlcomposer."""

from sqlcomposer.utils.decorators import traced

__all__ = [
    "traced",
]
