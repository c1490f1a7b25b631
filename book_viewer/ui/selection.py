"""Row cursor for the order book table, kept next to (not inside) the book."""

from __future__ import annotations


class Selection:
    """
    Selected row index into the book's display rows.

    The row count is passed in on every move since the book grows and
    shrinks between frames.
    """

    __slots__ = ('selected',)

    def __init__(self) -> None:
        self.selected: int | None = None

    def next(self, row_count: int) -> None:
        """Select the next row, wrapping to the top."""
        if row_count <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % row_count

    def previous(self, row_count: int) -> None:
        """Select the previous row, wrapping to the bottom."""
        if row_count <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected - 1) % row_count
