"""
Book Viewer - Live level-2 order book view for the Coinbase Exchange feed.

Architecture:
- datafeed/: WebSocket connection, message decoding and local order book
- engine/: Derived aggregates (total size per side, percent spread)
- ui/: Order book table + stats panel (Textual TUI)
"""

__version__ = "0.1.0"
