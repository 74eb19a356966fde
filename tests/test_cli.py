import io
import json
from pathlib import Path
import pytest
from pyv_cache.cli.main import build_parser, main


@pytest.fixture
def inputs(tmp_path: Path):
    """Memory image and trace for the one-set, one-way example."""
    memory = tmp_path / "mem.txt"
    memory.write_text("10 20 30 40 50 60 70 80\n")
    trace = tmp_path / "trace.txt"
    trace.write_text("0\n1\n4\nw 5 99\n")
    return memory, trace


def test_parser_geometry_flags():
    args = build_parser().parse_args(["run", "-s", "2", "-t", "8", "-b", "3", "-E", "4"])
    assert (args.index_bits, args.tag_bits, args.offset_bits, args.associativity) == (2, 8, 3, 4)
    assert args.memory_image is None


def test_run_command(inputs, tmp_path: Path, capsys):
    memory, trace = inputs
    report_dir = tmp_path / "report"

    rc = main(["run", "--memory", str(memory), "--trace", str(trace),
               "-s", "0", "-t", "4", "-b", "2", "-E", "1",
               "--report", str(report_dir), "--dump"])

    assert rc == 0
    out = capsys.readouterr().out
    assert "Set 0\n1 2 0x0001 32 63 46 50 \n" in out
    assert "[OK] Simulation finished (2 hits, 2 misses)" in out

    data = json.loads((report_dir / "report.json").read_text())
    assert data["stats"]["evictions"] == 1


def test_run_command_from_yaml(inputs, tmp_path: Path, capsys):
    memory, trace = inputs
    config = tmp_path / "cfg.yaml"
    config.write_text(
        f"memory_image: {memory}\ntrace: {trace}\n"
        "index_bits: 0\noffset_bits: 2\nassociativity: 1\n"
    )

    rc = main(["run", "-c", str(config), "--no-report"])

    assert rc == 0
    assert "(2 hits, 2 misses)" in capsys.readouterr().out


def test_run_command_missing_inputs():
    assert main(["run", "--no-report"]) == 1


def test_run_command_out_of_range_trace(tmp_path: Path):
    memory = tmp_path / "mem.txt"
    memory.write_text("1 2 3 4")
    trace = tmp_path / "trace.txt"
    trace.write_text("6\n")
    rc = main(["run", "--memory", str(memory), "--trace", str(trace),
               "-s", "0", "-b", "2", "--no-report"])
    assert rc == 1


def test_interactive_command(monkeypatch, capsys):
    stdin = "8\n10 20 30 40 50 60 70 80\n0 4 2 1\n0\n1\n4\n-1\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))

    rc = main(["interactive"])

    assert rc == 0
    out = capsys.readouterr().out
    assert out.startswith("Size of data: Input data >> s t b E: \n")
    assert out.endswith("Set 0\n1 1 0x0001 32 3c 46 50 \n")


def test_interactive_truncated_input(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("4\n1 2\n"))
    assert main(["interactive"]) == 1


def test_run_command_huge_memory_value(tmp_path: Path, capsys):
    memory = tmp_path / "mem.txt"
    memory.write_text("1 2 3 99999999999999999999")
    trace = tmp_path / "trace.txt"
    trace.write_text("0\n")
    rc = main(["run", "--memory", str(memory), "--trace", str(trace),
               "-s", "0", "-b", "2", "--no-report", "--dump"])
    assert rc == 0
    assert f"01 02 03 {99999999999999999999 & 0xFF:02x} " in capsys.readouterr().out
