"""
Aggregates shown under the order book table.

Only two things are derived from the book: total resting size per side and
the percent spread between best ask and best bid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from ..datafeed.orderbook import OrderBook


class BookStats(NamedTuple):
    total_bid_size: float
    total_ask_size: float
    percent_spread: float | None  # None while either side is empty


def percent_spread(best_bid_price: float, best_ask_price: float) -> float | None:
    """Gap between best ask and best bid as a percentage of the best bid."""
    # Positive when ask is above bid, not 100 - ask/bid*100
    if best_bid_price == 0:
        return None
    return (best_ask_price - best_bid_price) / best_bid_price * 100.0


def compute_stats(book: OrderBook) -> BookStats:
    """Compute display aggregates. Reads the book, never mutates it."""
    total_bid = sum(level.size for level in book.bids)
    total_ask = sum(level.size for level in book.asks)

    best_bid, best_ask = book.best_bid, book.best_ask
    spread = None
    if best_bid is not None and best_ask is not None:
        spread = percent_spread(best_bid.price, best_ask.price)

    return BookStats(float(total_bid), float(total_ask), spread)
