from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List


class TraceParseError(ValueError):
    """Raised when a trace line cannot be parsed."""


@dataclass
class TraceOp:
    """A single access in a trace."""
    op: str          # "R" or "W"
    address: int
    value: int | None = None

    @property
    def is_write(self) -> bool:
        return self.op == "W"


def parse_int(token: str) -> int:
    """Parses an integer literal; 0x/0o/0b prefixes are honoured, leading zeros are decimal."""
    try:
        return int(token, 0)
    except ValueError:
        return int(token, 10)


def parse_trace(lines: Iterable[str]) -> List[TraceOp]:
    """
    Parses trace lines into TraceOps.

    Accepted forms, one per line ('#' starts a comment):
        <addr>              read
        r <addr>            read
        w <addr> <value>    write
    A bare negative address ends the trace.
    """
    ops: List[TraceOp] = []
    for lineno, raw in enumerate(lines, start=1):
        text = raw.split("#", 1)[0].strip()
        if not text:
            continue
        fields = text.split()
        try:
            if len(fields) == 1:
                address = parse_int(fields[0])
                if address < 0:
                    break
                ops.append(TraceOp("R", address))
                continue

            kind = fields[0].upper()
            if kind == "R" and len(fields) == 2:
                ops.append(TraceOp("R", parse_int(fields[1])))
            elif kind == "W" and len(fields) == 3:
                ops.append(TraceOp("W", parse_int(fields[1]), parse_int(fields[2])))
            else:
                raise TraceParseError(f"line {lineno}: unrecognised access '{text}'")
        except ValueError as e:
            if isinstance(e, TraceParseError):
                raise
            raise TraceParseError(f"line {lineno}: {e}") from e

        op = ops[-1]
        if op.address < 0:
            raise TraceParseError(f"line {lineno}: negative address {op.address}")
        if op.is_write and not 0 <= op.value <= 0xFF:
            raise TraceParseError(f"line {lineno}: value {op.value} does not fit in a byte")
    return ops


def load_trace(path: str) -> List[TraceOp]:
    """Reads and parses a trace file."""
    trace_file = Path(path)
    if not trace_file.exists():
        raise FileNotFoundError(f"Trace file {path} not found.")
    with open(trace_file, "r") as f:
        return parse_trace(f)
