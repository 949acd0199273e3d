"""Tests for the golden record generator."""

from __future__ import annotations

from pathlib import Path

import yaml

from generate_golden_fields import build_expectations, main


def test_expectations_for_halting_program() -> None:
    got = build_expectations({"in_source": "++++++++[>++++++++<-]>."})
    assert got == {"state": "halted", "out_stdout": "@", "steps": 107}


def test_expectations_for_failing_program() -> None:
    got = build_expectations({"in_source": ",[.,]", "in_stdin": "ok"})
    assert got["error"] == "InputExhaustedError"
    assert got["out_stdout"] == "ok"
    assert "state" not in got


def test_raw_bytes_become_hex() -> None:
    got = build_expectations({"in_source": "-.", "config": {"output_mode": "byte"}})
    assert got["out_stdout_hex"] == "ff"


def test_main_updates_file(tmp_path: Path) -> None:
    p = tmp_path / "rec.yaml"
    p.write_text('in_source: "+++."\nout:\n  note: keep\n', encoding="utf-8")
    main(str(p))
    doc = yaml.safe_load(p.read_text(encoding="utf-8"))
    assert doc["out"]["note"] == "keep"
    assert doc["out"]["steps"] == 4
    assert doc["out"]["out_stdout"] == "\x03"


def test_main_drops_stale_outcome_keys(tmp_path: Path) -> None:
    """A record that used to halt and now fails keeps only the new outcome."""
    p = tmp_path / "rec.yaml"
    p.write_text(
        'in_source: "-.]"\nconfig:\n  output_mode: byte\nout:\n  out_stdout: "x"\n  state: halted\n  note: keep\n',
        encoding="utf-8",
    )
    main(str(p))
    out = yaml.safe_load(p.read_text(encoding="utf-8"))["out"]
    assert out["error"] == "UnbalancedLoopError"
    assert out["out_stdout_hex"] == "ff"
    assert "state" not in out
    assert "out_stdout" not in out
    assert out["note"] == "keep"
