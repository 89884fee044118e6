"""Utility helpers."""

from .numbers import to_decimal
from .time import utc_now

__all__ = ["to_decimal", "utc_now"]
