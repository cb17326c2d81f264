"""Tests for the tmcdb command line."""

import io

import pytest

from TMCDButils.cli.commands.ingest import read_records
from TMCDButils.cli.main import build_parser, main


@pytest.fixture(autouse=True)
def no_db_env(monkeypatch):
    monkeypatch.delenv("TMCDB_URL", raising=False)


def test_commands_are_discovered():
    parser = build_parser()
    subparsers = next(a for a in parser._actions if a.dest == "cmd")
    assert {"init-db", "ingest", "preallocate"} <= set(subparsers.choices)


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["init-db"],
        ["ingest", "-f", "/dev/null"],
        ["preallocate", "--antenna", "DV10", "--component", "Mount",
         "--monitor-point", "AZ", "--date", "2024-05-01"],
    ],
)
def test_missing_connection(argv, capsys):
    assert main(argv) == 1
    assert "No database connection configured" in capsys.readouterr().err


def test_preallocate_rejects_bad_size(capsys):
    argv = ["preallocate", "--antenna", "DV10", "--component", "Mount",
            "--monitor-point", "AZ", "--date", "2024-05-01", "--size", "-1"]
    assert main(argv) == 1
    assert "Value size out of range" in capsys.readouterr().err


def test_read_records_skips_blank_lines_and_keeps_bad_lines():
    stream = io.StringIO('{"a": 1}\n\n  \n{broken\n{"b": 2}\n')
    assert list(read_records(stream)) == [{"a": 1}, "{broken", {"b": 2}]
