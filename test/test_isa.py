"""Unit tests for instruction decoding."""

from __future__ import annotations

from isa import GATED, Instruction, decode, mnemonic


def test_decode_all_instructions() -> None:
    decoded = [decode(b) for b in b"><+-.,[]"]
    assert decoded == [
        Instruction.MOVE_RIGHT,
        Instruction.MOVE_LEFT,
        Instruction.INCREMENT,
        Instruction.DECREMENT,
        Instruction.OUTPUT,
        Instruction.INPUT,
        Instruction.LOOP_START,
        Instruction.LOOP_END,
    ]


def test_other_bytes_are_nops() -> None:
    for b in b"abc \n\t#!0":
        assert decode(b) is None
    assert decode(0) is None
    assert decode(0xFF) is None


def test_loop_instructions_are_not_gated() -> None:
    assert Instruction.LOOP_START not in GATED
    assert Instruction.LOOP_END not in GATED
    assert len(GATED) == 6


def test_mnemonic() -> None:
    assert mnemonic(ord("+")) == "INCREMENT '+'"
    assert mnemonic(ord("x")) == "NOP 'x'"
    assert mnemonic(0x0A) == "NOP 0x0A"
