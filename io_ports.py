"""I/O ports: byte-at-a-time input source and character output sink."""

from __future__ import annotations

import logging
from typing import BinaryIO

from errors import InputExhaustedError

OUTPUT_MODES = ("codepoint", "byte")


class OutputPort:
    """Renders cell values onto a binary sink.

    In "codepoint" mode a cell is a Unicode code point written as UTF-8, so
    values >= 128 take two bytes. In "byte" mode the raw octet is written.
    """

    sink: BinaryIO
    mode: str
    written: int

    def __init__(self, sink: BinaryIO, mode: str = "codepoint") -> None:
        if mode not in OUTPUT_MODES:
            err = f"unknown output mode {mode!r}, expected one of {OUTPUT_MODES}"
            raise ValueError(err)
        self.sink = sink
        self.mode = mode
        self.written = 0

    def render(self, value: int) -> bytes:
        value &= 0xFF
        if self.mode == "byte":
            return bytes((value,))
        return chr(value).encode("utf-8")

    def emit(self, value: int) -> None:
        data = self.render(value)
        self.sink.write(data)
        self.sink.flush()
        self.written += 1
        logging.debug("[OUT] %d -> %r", value, data)


class InputPort:
    """Reads single raw bytes from a binary source."""

    source: BinaryIO
    consumed: int

    def __init__(self, source: BinaryIO) -> None:
        self.source = source
        self.consumed = 0

    def read_byte(self) -> int:
        """Read exactly one byte.

        Raises InputExhaustedError at end of stream or when the source fails.
        """
        try:
            data = self.source.read(1)
        except (OSError, ValueError) as e:
            # ValueError: read on a closed file
            msg = f"input source failed: {e}"
            raise InputExhaustedError(msg) from e
        if not data:
            msg = "input exhausted"
            raise InputExhaustedError(msg)
        self.consumed += 1
        logging.debug("[IN] read %d", data[0])
        return data[0]
