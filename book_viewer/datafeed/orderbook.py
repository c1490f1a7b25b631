"""
Local level-2 order book fed by Coinbase snapshot + l2update frames.

HOT PATH: apply() is called once per received frame.

Book policy:
1. A snapshot replaces product id, bids and asks wholesale
2. An l2update appends each non-zero diff: buy diffs to asks, sell diffs to bids
3. Both sides are re-sorted ascending by price after every mutation

Known limitations:
- Same-price diffs are appended, never merged, so price rows can repeat
- Zero-size diffs are skipped rather than removing the level
- Updates arriving before the first snapshot are applied to the empty book
"""

from __future__ import annotations

from functools import cmp_to_key
from itertools import zip_longest
from typing import Any, Iterator

from ..types import Level, Level2Update, OrderSide, Snapshot
from .messages import decode_frame


def _compare_price(a: Level, b: Level) -> int:
    """Ascending price order; incomparable (NaN) pairs sort as less."""
    if a.price > b.price:
        return 1
    if a.price == b.price:
        return 0
    return -1


_PRICE_KEY = cmp_to_key(_compare_price)


class OrderBook:
    """
    Two-sided price-level book for a single instrument.

    Thread-safety: NOT thread-safe. Owned by the single poll loop.
    """

    __slots__ = ('product_id', 'bids', 'asks')

    def __init__(self) -> None:
        self.product_id: str = ""

        # Both sides ascending by price: best bid is last, best ask is first
        self.bids: list[Level] = []
        self.asks: list[Level] = []

    def apply(self, frame: Any) -> None:
        """
        Apply the next raw feed frame.

        HOT PATH - called for every frame. Frames that decode as neither
        message are dropped without error.
        """
        message = decode_frame(frame)
        if isinstance(message, Level2Update):
            self.apply_update(message)
        elif isinstance(message, Snapshot):
            self.load_snapshot(message)

    def apply_update(self, update: Level2Update) -> None:
        """Append the update's non-zero diffs, then re-sort both sides."""
        for diff in update.changes:
            if diff.level.size == 0:
                continue

            if diff.side is OrderSide.BUY:
                self.asks.append(diff.level)
            else:
                self.bids.append(diff.level)

        self._sort()

    def load_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the whole book. Snapshot order is not trusted."""
        self.product_id = snapshot.product_id
        self.bids = list(snapshot.bids)
        self.asks = list(snapshot.asks)
        self._sort()

    def _sort(self) -> None:
        self.asks.sort(key=_PRICE_KEY)
        self.bids.sort(key=_PRICE_KEY)

    @property
    def best_bid(self) -> Level | None:
        """Highest-priced bid, or None if no bids."""
        return self.bids[-1] if self.bids else None

    @property
    def best_ask(self) -> Level | None:
        """Lowest-priced ask, or None if no asks."""
        return self.asks[0] if self.asks else None

    @property
    def row_count(self) -> int:
        """Number of display rows: the longer of the two sides."""
        return max(len(self.bids), len(self.asks))

    def rows(self) -> Iterator[tuple[Level | None, Level | None]]:
        """
        Display rows, best prices first.

        Bids run from highest price down, asks from lowest price up; the
        shorter side is padded with None.
        """
        return zip_longest(reversed(self.bids), self.asks)
