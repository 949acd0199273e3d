"""Loop stack: bracket bookkeeping without a jump table.

Each `[` pushes a frame remembering where it started and whether its body is
skipped (the cell was zero on entry). A skipped body is still scanned once so
the matching `]` is found, but every effectful instruction checks
`current_skip()` and does nothing. Only the innermost frame is consulted:
while an outer frame skips the tape is frozen, so a nested `[` sees the same
zero cell and skips as well.
"""

from __future__ import annotations

from dataclasses import dataclass

from errors import UnbalancedLoopError, UnterminatedLoopError


@dataclass(frozen=True)
class LoopFrame:
    """One open `[`."""

    start: int
    skip: bool


@dataclass(frozen=True)
class Continue:
    """Fall through past the `]`."""


@dataclass(frozen=True)
class JumpTo:
    """Resume right after the `[` at `start`."""

    start: int


LoopAction = Continue | JumpTo

CONTINUE = Continue()

# Base frame: never popped, never skipping.
ROOT_FRAME = LoopFrame(start=-1, skip=False)


class LoopStack:
    """Stack of loop frames above a fixed root frame."""

    frames: list[LoopFrame]

    def __init__(self) -> None:
        self.frames = [ROOT_FRAME]

    @property
    def depth(self) -> int:
        """1 + number of open loops."""
        return len(self.frames)

    def open(self, at: int, zero_now: bool) -> None:
        """Push a frame for the `[` at `at`."""
        self.frames.append(LoopFrame(start=at, skip=zero_now))

    def close(self, cell: int) -> LoopAction:
        """Decide what the `]` does given the current cell value.

        Raises UnbalancedLoopError if no loop is open.
        """
        if len(self.frames) <= 1:
            err = "unexpected ']', not inside any loop"
            raise UnbalancedLoopError(err)
        top = self.frames[-1]
        if not top.skip and cell != 0:
            # frame stays for the next iteration
            return JumpTo(top.start)
        self.frames.pop()
        return CONTINUE

    def current_skip(self) -> bool:
        return self.frames[-1].skip

    def assert_balanced(self) -> None:
        """Raise UnterminatedLoopError if any loop is still open."""
        if len(self.frames) > 1:
            open_at = self.frames[-1].start
            err = f"unexpected end of program, {len(self.frames) - 1} loop(s) still open (innermost at {open_at})"
            raise UnterminatedLoopError(err)
