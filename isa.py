"""ISA: instruction bytes and decode helpers."""

from enum import IntEnum


class Instruction(IntEnum):
    """Keeps the eight instruction bytes."""

    MOVE_RIGHT = 0x3E  # >
    MOVE_LEFT = 0x3C  # <
    INCREMENT = 0x2B  # +
    DECREMENT = 0x2D  # -
    OUTPUT = 0x2E  # .
    INPUT = 0x2C  # ,
    LOOP_START = 0x5B  # [
    LOOP_END = 0x5D  # ]


_BY_BYTE: dict[int, Instruction] = {int(i): i for i in Instruction}

# Instructions suppressed while the innermost loop frame is skipping.
GATED = frozenset(
    {
        Instruction.MOVE_RIGHT,
        Instruction.MOVE_LEFT,
        Instruction.INCREMENT,
        Instruction.DECREMENT,
        Instruction.OUTPUT,
        Instruction.INPUT,
    }
)


def decode(byte: int) -> Instruction | None:
    """Decode one program byte.

    Returns None for bytes that are not instructions (comments, whitespace).
    """
    return _BY_BYTE.get(byte)


def mnemonic(byte: int) -> str:
    """Get a printable mnemonic for a program byte."""
    instr = decode(byte)
    if instr is None:
        if 32 <= byte < 127:
            return f"NOP {chr(byte)!r}"
        return f"NOP 0x{byte:02X}"
    return f"{instr.name} {chr(instr)!r}"
