#!/usr/bin/env python3
"""
Fill out_stdout / steps / state / error into a golden YAML record by running it.
Usage: python generate_golden_fields.py path/to/golden.yaml
"""

from __future__ import annotations

import io
import os
import sys
from typing import Any

import yaml

from config import load_config
from errors import InterpreterError
from processor import ControlUnit, Datapath

GENERATED_KEYS = ("out_stdout", "out_stdout_hex", "state", "error", "steps")


def build_expectations(doc: dict[str, Any]) -> dict[str, Any]:
    """Run the record's program and return the observed results."""
    cfg = load_config(doc.get("config") or {})
    stdout = io.BytesIO()
    dp = Datapath(
        str(doc["in_source"]).encode("utf-8"),
        stdin=io.BytesIO(str(doc.get("in_stdin", "")).encode("utf-8")),
        stdout=stdout,
        page_size=cfg["page_size"],
        output_mode=cfg["output_mode"],
        step_limit=cfg["step_limit"],
    )
    result: dict[str, Any] = {}
    try:
        _, state = ControlUnit(dp).run()
        result["state"] = state
    except InterpreterError as e:
        result["error"] = type(e).__name__

    out = stdout.getvalue()
    try:
        result["out_stdout"] = out.decode("utf-8")
    except UnicodeDecodeError:
        result["out_stdout_hex"] = out.hex()
    result["steps"] = dp.steps
    return result


def main(path: str) -> None:
    if not os.path.exists(path):
        print("File not found:", path)
        sys.exit(2)

    with open(path, encoding="utf-8") as f:
        doc = yaml.safe_load(f) or {}

    if "in_source" not in doc:
        print("No 'in_source' found in YAML - nothing to run")
        sys.exit(2)

    target = doc.setdefault("out", {})
    # generated fields are rewritten from scratch
    for key in GENERATED_KEYS:
        target.pop(key, None)
    target.update(build_expectations(doc))

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(doc, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    print(f"Updated {path} with observed results.")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: generate_golden_fields.py path/to/golden.yaml")
        sys.exit(1)
    main(sys.argv[1])
