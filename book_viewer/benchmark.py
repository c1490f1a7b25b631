#!/usr/bin/env python3
"""
Micro-benchmark for Book Viewer performance.

Tests:
1. Snapshot decode + load speed
2. l2update decode + apply throughput
3. Display stats computation speed

Usage:
    python -m book_viewer.benchmark
"""

from __future__ import annotations

import random
import time
from statistics import mean, stdev

from .datafeed.orderbook import OrderBook
from .engine.stats import compute_stats


def generate_mock_snapshot(base_price: float = 2000.0, levels: int = 1000) -> dict:
    """Generate a mock level2 snapshot frame."""
    tick_size = 0.01

    bids = []
    asks = []

    for i in range(levels):
        bid_price = base_price - (i + 1) * tick_size
        ask_price = base_price + (i + 1) * tick_size

        bids.append([f"{bid_price:.2f}", f"{random.uniform(0.01, 10):.8f}"])
        asks.append([f"{ask_price:.2f}", f"{random.uniform(0.01, 10):.8f}"])

    return {
        'type': 'snapshot',
        'product_id': 'ETH-USD',
        'bids': bids,
        'asks': asks,
    }


def generate_mock_update(base_price: float, changes: int = 2) -> dict:
    """Generate a mock l2update frame."""
    tick_size = 0.01

    diffs = []
    for _ in range(changes):
        side = random.choice(('buy', 'sell'))
        offset = random.randint(1, 500)
        price = base_price - offset * tick_size if side == 'buy' else base_price + offset * tick_size

        # Random size (0 = level emptied)
        size = random.uniform(0, 10) if random.random() > 0.2 else 0

        diffs.append([side, f"{price:.2f}", f"{size:.8f}"])

    return {
        'type': 'l2update',
        'product_id': 'ETH-USD',
        'changes': diffs,
        'time': '2022-08-04T15:25:05.010758Z',
    }


def benchmark_snapshot_load(iterations: int = 200) -> None:
    """Benchmark full snapshot decode + replace."""
    print("\n=== Snapshot Load Benchmark ===")

    frame = generate_mock_snapshot()
    book = OrderBook()

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        book.apply(frame)
        times.append(time.perf_counter() - start)

    avg_time = mean(times) * 1000
    std_time = stdev(times) * 1000

    print(f"  Iterations: {iterations}")
    print(f"  Avg time: {avg_time:.3f}ms")
    print(f"  Std dev: {std_time:.3f}ms")


def benchmark_updates(iterations: int = 2000) -> None:
    """
    Benchmark l2update throughput.

    Updates are append-only, so the book grows and each re-sort gets slower.
    """
    print("\n=== l2update Apply Benchmark ===")

    book = OrderBook()
    book.apply(generate_mock_snapshot(levels=200))

    # Pre-generate updates
    frames = [generate_mock_update(2000.0) for _ in range(iterations)]

    start = time.perf_counter()
    for frame in frames:
        book.apply(frame)
    elapsed = time.perf_counter() - start

    rate = iterations / elapsed
    print(f"  Updates applied: {iterations:,}")
    print(f"  Final rows: {book.row_count:,}")
    print(f"  Time: {elapsed*1000:.1f}ms")
    print(f"  Rate: {rate:,.0f} updates/sec")
    print(f"  Per update: {elapsed/iterations*1_000_000:.1f}µs")


def benchmark_stats(iterations: int = 1000) -> None:
    """Benchmark display aggregate computation (run once per render)."""
    print("\n=== Stats Computation Benchmark ===")

    book = OrderBook()
    book.apply(generate_mock_snapshot())

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        compute_stats(book)
        times.append(time.perf_counter() - start)

    avg_time = mean(times) * 1000

    print(f"  Iterations: {iterations}")
    print(f"  Avg time: {avg_time:.3f}ms")
    print(f"  Max FPS possible: {1000/avg_time:,.0f}")


def main() -> None:
    """Run all benchmarks."""
    print("=" * 60)
    print("Book Viewer Performance Benchmark")
    print("=" * 60)

    benchmark_snapshot_load()
    benchmark_updates()
    benchmark_stats()

    print("\n" + "=" * 60)
    print("Benchmark complete.")
    print("=" * 60)


if __name__ == "__main__":
    main()
