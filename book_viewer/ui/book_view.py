"""
Order book TUI using Textual.

Displays:
- Top: Bid Price / Bid Size / Ask Price / Ask Size table, best prices first
- Bottom: Total bid size, total ask size and percent spread

The poll loop runs as a single worker: await the next feed frame, apply it
to the book, refresh the widgets. Widgets only read the book.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from rich.console import RenderableType
from rich.style import Style
from rich.table import Table
from rich.text import Text

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Static

from ..datafeed.coinbase_client import FeedError
from ..datafeed.orderbook import OrderBook
from ..engine.stats import compute_stats
from .selection import Selection

if TYPE_CHECKING:
    from ..types import Level

logger = logging.getLogger(__name__)

# Color scheme
HEADER_COLOR = "red"
HEADER_BG = "blue"
BID_COLOR = "#22c55e"
ASK_COLOR = "#ef4444"
SELECTED_STYLE = Style(reverse=True)
HIGHLIGHT_SYMBOL = ">> "
WAITING_TITLE = "Waiting for snapshot..."


class Feed(Protocol):
    async def next_frame(self) -> Any: ...


def format_spread(spread: float | None) -> str:
    """Format percent spread for display."""
    if spread is None:
        return "n/a"
    return f"{spread:.4f}%"


def _level_cells(level: Level | None, color: str) -> tuple[Text, Text]:
    if level is None:
        return Text(""), Text("")
    return Text(str(level.price), style=color), Text(str(level.size))


class BookTable(Static):
    """Order book table widget."""

    DEFAULT_CSS = """
    BookTable {
        width: 100%;
        height: auto;
        border: round white;
    }
    """

    def __init__(self, book: OrderBook, selection: Selection) -> None:
        super().__init__()
        self._book = book
        self._selection = selection

    def render(self) -> RenderableType:
        """Render the book as a Rich Table."""
        book = self._book

        table = Table(
            show_header=True,
            header_style=Style(color=HEADER_COLOR, bgcolor=HEADER_BG),
            box=None,
            expand=True,
        )
        table.add_column("", width=len(HIGHLIGHT_SYMBOL), no_wrap=True)
        for title in ("Bid Price", "Bid Size", "Ask Price", "Ask Size"):
            table.add_column(title, ratio=1)

        selected = self._selection.selected
        for i, (bid, ask) in enumerate(book.rows()):
            is_selected = i == selected
            table.add_row(
                HIGHLIGHT_SYMBOL if is_selected else "",
                *_level_cells(bid, BID_COLOR),
                *_level_cells(ask, ASK_COLOR),
                style=SELECTED_STYLE if is_selected else None,
            )

        return table


class StatsPanel(Static):
    """Totals and spread below the table."""

    DEFAULT_CSS = """
    StatsPanel {
        dock: bottom;
        height: 5;
        padding: 0 1;
        border: round white;
        background: black;
        color: white;
    }
    """

    def __init__(self, book: OrderBook) -> None:
        super().__init__()
        self._book = book

    def render(self) -> RenderableType:
        stats = compute_stats(self._book)
        return Text("\n").join([
            Text(f"Total Bid Size: {stats.total_bid_size}"),
            Text(f"Total Ask Size: {stats.total_ask_size}"),
            Text(f"Percent Spread: {format_spread(stats.percent_spread)}"),
        ])


class BookApp(App):
    """Live order book view."""

    CSS = """
    #book-container {
        width: 100%;
        height: 1fr;
        overflow-y: auto;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("j", "next_row", "Down"),
        Binding("down", "next_row", "Down", show=False),
        Binding("k", "previous_row", "Up"),
        Binding("up", "previous_row", "Up", show=False),
    ]

    def __init__(self, feed: Feed) -> None:
        super().__init__()
        self.feed = feed
        self.book = OrderBook()
        self.selection = Selection()
        self.feed_error: FeedError | None = None
        self._book_table: BookTable | None = None
        self._stats_panel: StatsPanel | None = None

    def compose(self) -> ComposeResult:
        self._book_table = BookTable(self.book, self.selection)
        self._book_table.border_title = WAITING_TITLE
        self._stats_panel = StatsPanel(self.book)

        yield Container(self._book_table, id="book-container")
        yield self._stats_panel
        yield Footer()

    async def on_mount(self) -> None:
        """Start the feed poll loop."""
        self.run_worker(self._poll_feed(), exclusive=True)

    async def _poll_feed(self) -> None:
        """Await a frame, apply it, redraw. Stops on transport failure."""
        while True:
            try:
                frame = await self.feed.next_frame()
            except FeedError as e:
                logger.error("Feed failed: %s", e)
                self.feed_error = e
                self.exit()
                return

            self.book.apply(frame)
            self._refresh_views()

    def _refresh_views(self) -> None:
        if self._book_table:
            self._book_table.border_title = self.book.product_id or WAITING_TITLE
            self._book_table.refresh(layout=True)
        if self._stats_panel:
            self._stats_panel.refresh()

    def action_next_row(self) -> None:
        self.selection.next(self.book.row_count)
        self._refresh_views()

    def action_previous_row(self) -> None:
        self.selection.previous(self.book.row_count)
        self._refresh_views()


async def run_ui(feed: Feed) -> BookApp:
    """Run the TUI application until quit or feed failure."""
    app = BookApp(feed)
    await app.run_async()
    return app
