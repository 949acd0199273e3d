"""Runtime errors raised by the interpreter.

Every error aborts the run at the instruction that triggered it. Library code
only raises; the CLI in processor.py turns them into exit codes.
"""

from __future__ import annotations


class InterpreterError(Exception):
    """Base class for fatal runtime errors.

    `ip` is the instruction pointer where the error was detected, when known.
    """

    def __init__(self, message: str, ip: int | None = None) -> None:
        super().__init__(message)
        self.ip = ip

    def __str__(self) -> str:
        msg = super().__str__()
        if self.ip is None:
            return msg
        return f"{msg} (at instruction {self.ip})"


class OutOfBoundsError(InterpreterError):
    """Raised when the cursor would move left of cell 0."""


class UnbalancedLoopError(InterpreterError):
    """Raised on `]` with no open loop."""


class UnterminatedLoopError(InterpreterError):
    """Raised when the program ends inside one or more open loops."""


class InputExhaustedError(InterpreterError, EOFError):
    """Raised when `,` cannot read a byte from the input source."""
