"""
Decoding of raw Coinbase level2 frames into typed messages.

Two message shapes are understood:
- l2update: {type, product_id, time, changes: [[side, price, size], ...]}
- snapshot: {type, product_id, bids: [[price, size], ...], asks: [...]}

Every function here returns None instead of raising. Malformed elements
(a single change or level) are dropped while their well-formed siblings
survive; a malformed envelope drops the whole frame.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..types import Level, Level2Update, OrderBookDiff, OrderSide, Snapshot

logger = logging.getLogger(__name__)

# Max chars of a discarded payload written to the log
_LOG_PAYLOAD_CHARS = 200


def parse_number(token: Any) -> float | None:
    """
    Parse a decimal token.

    The feed sends prices and sizes as strings ("10101.10"); plain JSON
    numbers are accepted too. Booleans are not numbers here.
    """
    if isinstance(token, bool):
        return None
    if isinstance(token, (int, float)):
        try:
            return float(token)
        except OverflowError:
            return None
    if not isinstance(token, str):
        return None
    # float() is more lenient than a decimal literal
    if not token.isascii() or token != token.strip() or "_" in token:
        return None
    try:
        return float(token)
    except ValueError:
        return None


def parse_level(value: Any) -> Level | None:
    """Parse a [price, size] pair."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    price, size = parse_number(value[0]), parse_number(value[1])
    if price is None or size is None:
        return None
    return Level(price, size)


def parse_change(value: Any) -> OrderBookDiff | None:
    """Parse a [side, price, size] triple."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return None
    side = OrderSide.parse(value[0])
    level = parse_level(value[1:])
    if side is None or level is None:
        return None
    return OrderBookDiff(side, level)


def parse_time(token: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp. Naive timestamps are rejected."""
    if not isinstance(token, str):
        return None
    try:
        parsed = datetime.fromisoformat(token)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone(timezone.utc)


def _envelope_str(frame: Any, key: str) -> str | None:
    value = frame.get(key)
    return value if isinstance(value, str) else None


def decode_update(frame: Any) -> Level2Update | None:
    """Try to read frame as an l2update."""
    if not isinstance(frame, dict):
        return None
    if _envelope_str(frame, "type") is None:
        return None

    product_id = _envelope_str(frame, "product_id")
    time = parse_time(frame.get("time"))
    changes = frame.get("changes")
    if product_id is None or time is None or not isinstance(changes, list):
        return None

    diffs = [diff for diff in map(parse_change, changes) if diff is not None]
    return Level2Update(product_id, time, diffs)


def decode_snapshot(frame: Any) -> Snapshot | None:
    """Try to read frame as a full book snapshot."""
    if not isinstance(frame, dict):
        return None
    if _envelope_str(frame, "type") is None:
        return None

    product_id = _envelope_str(frame, "product_id")
    bids, asks = frame.get("bids"), frame.get("asks")
    if product_id is None or not isinstance(bids, list) or not isinstance(asks, list):
        return None

    return Snapshot(
        product_id=product_id,
        bids=[level for level in map(parse_level, bids) if level is not None],
        asks=[level for level in map(parse_level, asks) if level is not None],
    )


def decode_frame(frame: Any) -> Level2Update | Snapshot | None:
    """
    Decode one feed frame: l2update first, then snapshot.

    Frames matching neither (subscriptions acks, heartbeats, schema drift)
    are logged at DEBUG and dropped.
    """
    message = decode_update(frame)
    if message is None:
        message = decode_snapshot(frame)
    if message is None:
        logger.debug("Discarding frame: %.*s", _LOG_PAYLOAD_CHARS, repr(frame))
    return message
