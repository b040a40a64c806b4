"""
Tests for the inspection CLI.
"""

import json
from pathlib import Path
from typing import Any

import pytest

from chuk_strudel.cli import build_pattern, create_parser, main


def run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, dict[str, Any]]:
    code = main(list(argv))
    return code, json.loads(capsys.readouterr().out)


class TestParser:
    """Tests for argument parsing."""

    def test_query_arguments(self) -> None:
        """Chained methods collect into lists."""
        args = create_parser().parse_args(
            ["query", "note", "c e", "--then", "gain", "0.5", "--then", "rev", "--cycles", "2"]
        )
        assert args.function == "note"
        assert args.args == ["c e"]
        assert args.then == [["gain", "0.5"], ["rev"]]
        assert args.cycles == "2"

    def test_command_required(self) -> None:
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])


class TestBuildPattern:
    """Tests for building patterns from command-line words."""

    def test_chain(self) -> None:
        """The function is called, then each method in order."""
        pattern = build_pattern("seq", ["0 2"], [["scale", "C4:major"], ["gain", "0.5"]])
        events = pattern.first_cycle()
        assert [e.data.note for e in events] == ["C4", "E4"]
        assert all(e.data.gain == 0.5 for e in events)

    def test_unknown_function(self) -> None:
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown function"):
            build_pattern("nope", [])
        with pytest.raises(ValueError, match="Unknown method"):
            build_pattern("note", ["c"], [["nope"]])


class TestMain:
    """Tests for the entry point."""

    def test_list_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Listing one table gives its names."""
        code, result = run(capsys, "list", "--table", "functions")
        assert code == 0
        assert result["status"] == "success"
        assert "note" in result["names"]
        assert "sine" in result["names"]
        assert result["count"] == len(result["names"])

    def test_list_all(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Listing without a table gives all three."""
        code, result = run(capsys, "list")
        assert code == 0
        assert set(result["tables"]) == {"functions", "pattern_methods", "string_methods"}
        assert "sine" not in result["tables"]["pattern_methods"]

    def test_query(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Events are printed with exact times and set fields."""
        code, result = run(capsys, "query", "note", "c e g", "--then", "gain", "0.5")
        assert code == 0
        assert result["count"] == 3
        first = result["events"][0]
        assert first["part"] == ["0", "1/3"]
        assert first["whole"] == ["0", "1/3"]
        assert first["data"]["note"] == "C"
        assert first["data"]["gain"] == 0.5

    def test_query_cycles(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--begin and --cycles choose the arc."""
        code, result = run(capsys, "query", "note", "<c e>", "--begin", "1", "--cycles", "2")
        assert code == 0
        assert [e["data"]["note"] for e in result["events"]] == ["E", "C"]
        assert result["events"][0]["part"] == ["1", "2"]

    def test_unknown_function(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Unknown functions are reported as errors."""
        code, result = run(capsys, "query", "nope")
        assert code == 1
        assert result == {"status": "error", "message": "Unknown function: nope"}

    def test_malformed_notation(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Parse errors are reported, not raised."""
        code, result = run(capsys, "query", "note", "[c e")
        assert code == 1
        assert result["status"] == "error"
        assert "Missing ']'" in result["message"]

    def test_missing_config(self, capsys: pytest.CaptureFixture[str], temp_dir: Path) -> None:
        """A missing config file is an error."""
        code, result = run(capsys, "--config", str(temp_dir / "nope.yaml"), "list")
        assert code == 1
        assert "Config file not found" in result["message"]

    def test_config_applied(self, capsys: pytest.CaptureFixture[str], temp_dir: Path) -> None:
        """The config file changes resolution."""
        path = temp_dir / "engine.yaml"
        path.write_text("default_gain: 0.25\n")
        code, result = run(capsys, "--config", str(path), "query", "note", "c")
        assert code == 0
        assert result["events"][0]["data"]["gain"] == 0.25
