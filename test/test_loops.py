"""Unit tests for the loop stack."""

from __future__ import annotations

import pytest

from errors import UnbalancedLoopError, UnterminatedLoopError
from loops import CONTINUE, Continue, JumpTo, LoopFrame, LoopStack


def test_root_frame_only() -> None:
    s = LoopStack()
    assert s.depth == 1
    assert s.current_skip() is False
    s.assert_balanced()


def test_close_without_open_fails() -> None:
    """An unmatched `]` is detected against the root frame."""
    s = LoopStack()
    with pytest.raises(UnbalancedLoopError):
        s.close(0)
    assert s.depth == 1


def test_open_tracks_depth_and_skip() -> None:
    s = LoopStack()
    s.open(3, zero_now=False)
    s.open(5, zero_now=True)
    assert s.depth == 3
    assert s.current_skip() is True
    assert s.frames[-1] == LoopFrame(start=5, skip=True)


def test_close_nonzero_jumps_and_keeps_frame() -> None:
    s = LoopStack()
    s.open(4, zero_now=False)
    action = s.close(1)
    assert action == JumpTo(4)
    assert s.depth == 2


def test_close_zero_pops() -> None:
    s = LoopStack()
    s.open(4, zero_now=False)
    action = s.close(0)
    assert isinstance(action, Continue)
    assert action is CONTINUE
    assert s.depth == 1


def test_close_skipped_frame_pops_regardless_of_cell() -> None:
    """A skipped frame ends at its `]` even if the cell is nonzero."""
    s = LoopStack()
    s.open(0, zero_now=True)
    assert s.close(9) == CONTINUE
    assert s.depth == 1
    assert s.current_skip() is False


def test_unterminated() -> None:
    s = LoopStack()
    s.open(0, zero_now=False)
    s.open(1, zero_now=False)
    with pytest.raises(UnterminatedLoopError, match="2 loop"):
        s.assert_balanced()


def test_frames_are_values() -> None:
    f = LoopFrame(start=2, skip=False)
    with pytest.raises(AttributeError):
        f.start = 3  # type: ignore[misc]
