"""Tests for frame decoding: levels, changes, l2update and snapshot envelopes."""

from datetime import datetime, timezone

import pytest

from book_viewer.datafeed.messages import (
    decode_frame,
    decode_snapshot,
    decode_update,
    parse_change,
    parse_level,
    parse_number,
    parse_time,
)
from book_viewer.types import Level, Level2Update, OrderBookDiff, OrderSide, Snapshot


def _snapshot_frame(**overrides):
    frame = {
        "type": "snapshot",
        "product_id": "BTC-USD",
        "bids": [["10101.10", "0.45054140"]],
        "asks": [["10102.55", "0.57753524"]],
    }
    frame.update(overrides)
    return frame


def _update_frame(**overrides):
    frame = {
        "type": "l2update",
        "product_id": "BTC-USD",
        "changes": [
            ["buy", "22356.270000", "0.00000000"],
            ["sell", "22356.300000", "1.00000000"],
        ],
        "time": "2022-08-04T15:25:05.010758Z",
    }
    frame.update(overrides)
    return frame


class TestParseLevel:
    def test_numeric_strings(self):
        assert parse_level(["1", "1"]) == Level(price=1.0, size=1.0)

    def test_price_first_then_size(self):
        level = parse_level(["10101.10", "0.45"])
        assert level.price == 10101.10
        assert level.size == 0.45

    def test_json_numbers_accepted(self):
        assert parse_level([22356.3, 1]) == Level(22356.3, 1.0)

    @pytest.mark.parametrize("value", [
        ["abc", "1"],
        ["1", ""],
        ["1"],
        ["1", "1", "1"],
        "1,1",
        None,
        {"price": "1", "size": "1"},
        [True, "1"],
        [" 1", "1"],
        ["1_000", "1"],
        [10**400, "1"],
        ["١٢", "1"],
    ])
    def test_malformed_yields_none(self, value):
        assert parse_level(value) is None


class TestParseHelpers:
    def test_parse_number(self):
        assert parse_number("0.00000000") == 0.0
        assert parse_number("1e3") == 1000.0
        assert parse_number(None) is None
        assert parse_number(False) is None

    def test_side_tokens(self):
        assert OrderSide.parse("buy") is OrderSide.BUY
        assert OrderSide.parse("sell") is OrderSide.SELL
        assert OrderSide.parse("BUY") is None
        assert OrderSide.parse("bid") is None
        assert OrderSide.parse(1) is None

    def test_parse_change(self):
        assert parse_change(["sell", "22356.3", "1.0"]) == OrderBookDiff(
            OrderSide.SELL, Level(22356.3, 1.0)
        )
        assert parse_change(["hold", "1", "1"]) is None
        assert parse_change(["buy", "1"]) is None

    def test_parse_time_utc(self):
        parsed = parse_time("2022-08-04T15:25:05.010758Z")
        assert parsed == datetime(2022, 8, 4, 15, 25, 5, 10758, tzinfo=timezone.utc)

    def test_parse_time_offset_converted(self):
        parsed = parse_time("2022-08-04T17:25:05+02:00")
        assert parsed == datetime(2022, 8, 4, 15, 25, 5, tzinfo=timezone.utc)

    def test_parse_time_rejects_naive_and_garbage(self):
        assert parse_time("2022-08-04T15:25:05") is None
        assert parse_time("yesterday") is None
        assert parse_time(1659626705) is None


class TestDecodeSnapshot:
    def test_well_formed(self):
        snapshot = decode_snapshot(_snapshot_frame())
        assert snapshot.product_id == "BTC-USD"
        assert snapshot.bids == [Level(price=10101.10, size=0.45054140)]
        assert snapshot.asks == [Level(price=10102.55, size=0.57753524)]

    def test_malformed_levels_dropped(self):
        snapshot = decode_snapshot(_snapshot_frame(
            bids=[["100.0", "1"], ["oops", "2"], ["99.0"], ["98.0", "3"]],
            asks=[None, ["101.0", "4"]],
        ))
        assert snapshot.bids == [Level(100.0, 1.0), Level(98.0, 3.0)]
        assert snapshot.asks == [Level(101.0, 4.0)]

    def test_empty_sides(self):
        snapshot = decode_snapshot(_snapshot_frame(bids=[], asks=[]))
        assert snapshot == Snapshot("BTC-USD", [], [])

    @pytest.mark.parametrize("missing", ["type", "product_id", "bids", "asks"])
    def test_missing_field(self, missing):
        frame = _snapshot_frame()
        del frame[missing]
        assert decode_snapshot(frame) is None

    def test_wrong_field_types(self):
        assert decode_snapshot(_snapshot_frame(type=1)) is None
        assert decode_snapshot(_snapshot_frame(bids="none")) is None
        assert decode_snapshot([1, 2]) is None


class TestDecodeUpdate:
    def test_well_formed(self):
        update = decode_update(_update_frame())
        assert update.product_id == "BTC-USD"
        assert update.time == datetime(2022, 8, 4, 15, 25, 5, 10758, tzinfo=timezone.utc)
        assert update.changes == [
            OrderBookDiff(OrderSide.BUY, Level(price=22356.27, size=0.0)),
            OrderBookDiff(OrderSide.SELL, Level(price=22356.3, size=1.0)),
        ]

    def test_malformed_changes_dropped_in_order(self):
        update = decode_update(_update_frame(changes=[
            ["sell", "3", "1"],
            ["short", "2", "1"],
            ["buy", "x", "1"],
            ["buy", "1"],
            ["buy", "1", "2"],
        ]))
        assert [diff.level.price for diff in update.changes] == [3.0, 1.0]

    def test_zero_surviving_changes_still_decodes(self):
        update = decode_update(_update_frame(changes=[["nope", "1", "1"]]))
        assert update == Level2Update(update.product_id, update.time, [])

    @pytest.mark.parametrize("missing", ["type", "product_id", "time", "changes"])
    def test_missing_field(self, missing):
        frame = _update_frame()
        del frame[missing]
        assert decode_update(frame) is None

    def test_bad_time_rejects_envelope(self):
        assert decode_update(_update_frame(time="not a time")) is None


class TestDecodeFrame:
    def test_update_preferred(self):
        assert isinstance(decode_frame(_update_frame()), Level2Update)

    def test_snapshot(self):
        assert isinstance(decode_frame(_snapshot_frame()), Snapshot)

    @pytest.mark.parametrize("frame", [
        {"type": "subscriptions", "channels": [{"name": "level2"}]},
        {"product_id": "BTC-USD", "bids": [], "asks": []},
        None,
        "l2update",
        42,
    ])
    def test_unknown_frames_dropped(self, frame):
        assert decode_frame(frame) is None
