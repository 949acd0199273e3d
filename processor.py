"""Processor (Datapath + ControlUnit) and CLI wrapper.

The ControlUnit walks the program one byte at a time and dispatches each
instruction to the tape, the I/O ports or the loop stack held by the Datapath.
There is no parse tree and no jump table: loops are resolved at run time by
the loop stack.
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Callable

from config import ConfigError, load_config
from errors import InterpreterError
from io_ports import InputPort, OutputPort
from isa import GATED, Instruction, decode, mnemonic
from loops import JumpTo, LoopStack
from tape import DEFAULT_PAGE_SIZE, Tape

LOGFILE = "processor.log"

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_USAGE = 2


def init_logging(logfile: str = LOGFILE, debug: bool = False, console: bool = False) -> None:
    """Configure root logger to write to `logfile`.

    If debug=True set DEBUG level. If console=True also echo logs to stderr
    (stdout carries program output).
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    lvl = logging.DEBUG if debug else logging.CRITICAL
    root.setLevel(lvl)

    # In debug mode use a compact format without timestamps so traces diff cleanly
    if debug:
        file_fmt = "%(levelname)s %(name)s:%(filename)s:%(lineno)d %(message)s"
    else:
        file_fmt = "%(levelname)-5s %(message)s"

    fh = logging.FileHandler(logfile, mode="w", encoding="utf-8")
    fh.setLevel(lvl)
    fh.setFormatter(logging.Formatter(file_fmt))
    root.addHandler(fh)

    if debug and console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(lvl)
        ch.setFormatter(logging.Formatter("%(levelname)5s %(message)s"))
        root.addHandler(ch)


@dataclass(frozen=True)
class TraceEvent:
    """Machine state seen right before an instruction executes."""

    ip: int
    instruction: int
    cell: int
    cursor: int
    tape_size: int
    depth: int


TraceHook = Callable[[TraceEvent], None]


def log_trace(event: TraceEvent) -> None:
    """Trace hook writing one DEBUG line per instruction."""
    logging.debug(
        "exec 0x%x = %s, data: 0x%x = %r (0x%x), depth: %d, reserved data size: %d B",
        event.ip,
        mnemonic(event.instruction),
        event.cell,
        chr(event.cell),
        event.cursor,
        event.depth,
        event.tape_size,
    )


class Datapath:
    """Machine state: program, tape, loop stack and I/O ports."""

    program: bytes
    ip: int
    steps: int
    step_limit: int | None

    tape: Tape
    loops: LoopStack
    inp: InputPort
    out: OutputPort

    def __init__(
        self,
        program: bytes,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        output_mode: str = "codepoint",
        step_limit: int | None = None,
    ) -> None:
        """Initialize Datapath state for one run."""
        self.program = bytes(program or b"")
        self.ip = 0
        self.steps = 0
        self.step_limit = step_limit

        self.tape = Tape(page_size)
        self.loops = LoopStack()
        self.inp = InputPort(stdin if stdin is not None else sys.stdin.buffer)
        self.out = OutputPort(stdout if stdout is not None else sys.stdout.buffer, output_mode)
        logging.debug(
            "Datapath: %d program bytes, page size %d, output mode %s",
            len(self.program),
            self.tape.page_size,
            output_mode,
        )

    def load(self, program: bytes) -> None:
        """Replace the program and rewind the instruction pointer.

        Open loop frames are discarded so a run aborted inside a loop does not
        leak into the next program. The tape and step counter are kept.
        """
        self.program = bytes(program)
        self.ip = 0
        self.loops = LoopStack()


class ControlUnit:
    """Control unit implementing the fetch-decode-dispatch loop for the Datapath."""

    dp: Datapath
    trace: TraceHook | None

    def __init__(self, dp: Datapath, trace: TraceHook | None = None) -> None:
        """Create a ControlUnit bound to `dp`, optionally tracing each step."""
        self.dp = dp
        self.trace = trace

    def run(self) -> tuple[int, str]:
        """Execute until the program ends or the step limit is reached.

        Returns (steps, state) where state is "halted" or "step_limit".
        Raises an InterpreterError subclass on any fatal condition.
        """
        dp = self.dp
        program = dp.program
        try:
            while dp.ip < len(program):
                if dp.step_limit is not None and dp.steps >= dp.step_limit:
                    logging.debug("Step limit %d reached at ip %d", dp.step_limit, dp.ip)
                    return dp.steps, "step_limit"

                byte = program[dp.ip]
                if self.trace is not None:
                    self.trace(
                        TraceEvent(
                            ip=dp.ip,
                            instruction=byte,
                            cell=dp.tape.current(),
                            cursor=dp.tape.cursor,
                            tape_size=dp.tape.size,
                            depth=dp.loops.depth,
                        )
                    )

                dp.steps += 1
                instr = decode(byte)
                if instr is not None and self.exec(instr):
                    continue
                dp.ip += 1

            dp.loops.assert_balanced()
        except InterpreterError as e:
            if e.ip is None:
                e.ip = dp.ip
            logging.debug("Run aborted after %d steps: %s", dp.steps, e)
            raise

        logging.debug("Program finished after %d steps, %d chars written", dp.steps, dp.out.written)
        return dp.steps, "halted"

    def exec(self, instr: Instruction) -> bool:  # noqa: C901
        """Execute a single instruction.

        Returns True when the instruction pointer was repositioned by a jump.
        """
        dp = self.dp

        if instr in GATED and dp.loops.current_skip():
            return False

        if instr == Instruction.MOVE_RIGHT:
            dp.tape.advance()
            return False
        if instr == Instruction.MOVE_LEFT:
            dp.tape.retreat()
            return False
        if instr == Instruction.INCREMENT:
            dp.tape.increment()
            return False
        if instr == Instruction.DECREMENT:
            dp.tape.decrement()
            return False
        if instr == Instruction.OUTPUT:
            dp.out.emit(dp.tape.current())
            return False
        if instr == Instruction.INPUT:
            dp.tape.write(dp.inp.read_byte())
            return False

        if instr == Instruction.LOOP_START:
            dp.loops.open(dp.ip, dp.tape.current() == 0)
            return False
        if instr == Instruction.LOOP_END:
            action = dp.loops.close(dp.tape.current())
            if isinstance(action, JumpTo):
                # land after the `[` so the frame is not pushed again
                dp.ip = action.start + 1
                return True
            return False

        return False

    def dump_tape(self, path: str | Path) -> None:
        """Write the non-zero cells of the tape to a text file."""
        tape = self.dp.tape
        with open(path, "w", encoding="utf-8") as f:
            f.write("=== TAPE DUMP ===\n")
            f.write(f"cells: {tape.size}  cursor: {tape.cursor}  steps: {self.dp.steps}\n\n")
            for i, v in enumerate(tape.cells):
                if v == 0 and i != tape.cursor:
                    continue
                ch = chr(v) if 32 <= v < 127 else "."
                marker = "  <- cursor" if i == tape.cursor else ""
                f.write(f"{i:08d}: {v:3d} 0x{v:02X} '{ch}'{marker}\n")
            f.write("\n=== END DUMP ===\n")


# ---------- Public API ----------
def run_bytes(
    program: bytes,
    input_bytes: bytes = b"",
    config: dict[str, Any] | None = None,
    trace: TraceHook | None = None,
) -> tuple[bytes, int, str]:
    """Run a program against in-memory input and return (output, steps, state)."""
    cfg = load_config(config)
    if trace is None and cfg["trace"]:
        trace = log_trace

    sink = io.BytesIO()
    dp = Datapath(
        program,
        stdin=io.BytesIO(input_bytes),
        stdout=sink,
        page_size=cfg["page_size"],
        output_mode=cfg["output_mode"],
        step_limit=cfg["step_limit"],
    )
    cu = ControlUnit(dp, trace=trace)
    steps, state = cu.run()
    return sink.getvalue(), steps, state


# ---------- CLI ----------
def main(argv: list[str] | None = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    ap = argparse.ArgumentParser(
        description="Byte-tape interpreter. Runs PROGRAM with stdin as input and stdout as output."
    )
    ap.add_argument("program", help="program source file (read as raw bytes)")
    ap.add_argument("--config", help="path to yaml config", default=None)
    ap.add_argument(
        "--debug",
        action="store_true",
        help="log machine state before every instruction to the logfile",
    )
    ap.add_argument("--logfile", default=LOGFILE, help="path to processor log")
    ap.add_argument("--console", action="store_true", help="also echo logs to stderr (only when --debug)")
    ap.add_argument("--dump", default=None, help="write a tape dump to this file after the run")
    args = ap.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print("Bad config:", e, file=sys.stderr)
        return EXIT_USAGE

    debug = args.debug or cfg["trace"]
    init_logging(logfile=args.logfile, debug=debug, console=args.console)

    program_path = Path(args.program)
    if not program_path.is_file():
        print("Program file not found:", args.program, file=sys.stderr)
        return EXIT_USAGE
    program = program_path.read_bytes()

    trace = log_trace if debug else None
    dp = Datapath(
        program,
        page_size=cfg["page_size"],
        output_mode=cfg["output_mode"],
        step_limit=cfg["step_limit"],
    )
    cu = ControlUnit(dp, trace=trace)

    code = EXIT_OK
    try:
        steps, state = cu.run()
        logging.debug("CLI: run finished, steps=%d state=%s", steps, state)
    except InterpreterError as e:
        logging.error("%s: %s", type(e).__name__, e)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        code = EXIT_RUNTIME_ERROR
    finally:
        if args.dump:
            cu.dump_tape(args.dump)
    return code


if __name__ == "__main__":
    sys.exit(main())
