"""Tape: growable byte memory with a cursor."""

from __future__ import annotations

import logging

from errors import OutOfBoundsError

DEFAULT_PAGE_SIZE = 1024


class Tape:
    """Linear memory of unsigned 8-bit cells, unbounded to the right."""

    cells: bytearray
    cursor: int
    page_size: int

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """Allocate one zero-filled page with the cursor on cell 0."""
        self.page_size = int(page_size)
        if self.page_size <= 0:
            err = "page_size must be positive"
            raise ValueError(err)
        self.cells = bytearray(self.page_size)
        self.cursor = 0

    @property
    def size(self) -> int:
        """Number of allocated cells."""
        return len(self.cells)

    def current(self) -> int:
        return self.cells[self.cursor]

    def advance(self) -> None:
        """Move right, growing the tape a page at a time when needed."""
        self.cursor += 1
        if self.cursor >= len(self.cells):
            # next page multiple strictly above the cursor
            new_size = (self.cursor // self.page_size + 1) * self.page_size
            self.cells.extend(bytes(new_size - len(self.cells)))
            logging.debug("Tape: grown to %d cells (cursor %d)", new_size, self.cursor)

    def retreat(self) -> None:
        """Move left. Cell 0 is a hard boundary."""
        if self.cursor == 0:
            err = "cannot move cursor left of cell 0"
            raise OutOfBoundsError(err)
        self.cursor -= 1

    def increment(self) -> None:
        self.cells[self.cursor] = (self.cells[self.cursor] + 1) & 0xFF

    def decrement(self) -> None:
        self.cells[self.cursor] = (self.cells[self.cursor] - 1) & 0xFF

    def write(self, value: int) -> None:
        """Store `value` (masked to 8 bits) in the current cell."""
        self.cells[self.cursor] = int(value) & 0xFF

    def snapshot(self, start: int = 0, stop: int | None = None) -> bytes:
        """Return a copy of cells[start:stop]."""
        return bytes(self.cells[start:stop])
