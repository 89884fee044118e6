"""Shared type aliases for the domain layer."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, NewType

AccountId = NewType("AccountId", str)
Amount = Decimal | int | float | str
Score = int | float
StateView = Mapping[str, Any]

__all__ = [
    "AccountId",
    "Amount",
    "Score",
    "StateView",
]
