"""
Data types for Book Viewer.

Notes:
- Using NamedTuple for immutable, value-compared structures
- Feed messages are decoded into these by datafeed/messages.py
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import NamedTuple


class Level(NamedTuple):
    """Single price level: aggregate resting size at one price."""
    price: float
    size: float


class OrderSide(Enum):
    """Side token of an l2update change."""
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, token: object) -> OrderSide | None:
        """Map a wire token to a side. Returns None for anything else."""
        if not isinstance(token, str):
            return None
        try:
            return cls(token)
        except ValueError:
            return None


class OrderBookDiff(NamedTuple):
    """One incremental change from an l2update."""
    side: OrderSide
    level: Level


class Level2Update(NamedTuple):
    """
    Batch of diffs arriving together.

    Changes are applied in sequence order.
    """
    product_id: str
    time: datetime          # UTC, timezone-aware
    changes: list[OrderBookDiff]


class Snapshot(NamedTuple):
    """Full replacement of the book's bid/ask levels."""
    product_id: str
    bids: list[Level]
    asks: list[Level]
