"""Tests for the command-line interface."""

import json
import logging

import pytest
from typer.testing import CliRunner

from eventsplit import __version__
from eventsplit.cli import app, decode_escapes
from eventsplit.logging_config import LOGGER_NAME, setup_logging

runner = CliRunner()


@pytest.fixture
def restore_logging():
    """Put the eventsplit logger back on the real stderr after a CLI run"""
    yield
    setup_logging("WARNING")


def write_jsonl(path, *documents) -> None:
    """Write documents to path as JSON Lines."""
    path.write_text("".join(json.dumps(d) + "\n" for d in documents))


def read_jsonl(path) -> list[dict]:
    """Read all documents from a JSON Lines file."""
    return [json.loads(line) for line in path.read_text().splitlines() if line]


class TestDecodeEscapes:
    """Tests for decode_escapes."""

    def test_known_escapes(self) -> None:
        assert decode_escapes("\\n") == "\n"
        assert decode_escapes("\\t") == "\t"
        assert decode_escapes("a\\\\b") == "a\\b"

    def test_plain_text_unchanged(self) -> None:
        assert decode_escapes(",") == ","
        assert decode_escapes("é|") == "é|"

    def test_unknown_escape_kept(self) -> None:
        assert decode_escapes("\\q") == "\\q"


class TestSplitCommand:
    """Tests for the split command."""

    def test_split_defaults(self, tmp_path) -> None:
        """Split message on newlines."""
        source = tmp_path / "in.jsonl"
        output = tmp_path / "out.jsonl"
        write_jsonl(source, {"message": "big\nbird\nsesame street"})

        result = runner.invoke(app, ["split", str(source), "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert [d["message"] for d in read_jsonl(output)] == ["big", "bird", "sesame street"]

    def test_split_with_terminator_escape(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        output = tmp_path / "out.jsonl"
        write_jsonl(source, {"message": "a\tb"})

        result = runner.invoke(
            app, ["split", str(source), "--terminator", "\\t", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert [d["message"] for d in read_jsonl(output)] == ["a", "b"]

    def test_split_target_and_delete(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        output = tmp_path / "out.jsonl"
        write_jsonl(source, {"in": "one\ntwo"})

        result = runner.invoke(
            app,
            [
                "split", str(source),
                "--field", "in",
                "--target", "out",
                "--delete-field",
                "-o", str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert read_jsonl(output) == [{"out": "one"}, {"out": "two"}]

    def test_split_merge_hash_with_metadata(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        output = tmp_path / "out.jsonl"
        write_jsonl(source, {"keep": 1, "events": [{"id": 2}, {"id": 3}]})

        result = runner.invoke(
            app,
            [
                "split", str(source),
                "-f", "events",
                "--merge-hash",
                "--delete-field",
                "--include-metadata",
                "-o", str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert read_jsonl(output) == [
            {"keep": 1, "id": 2, "@metadata": {"split_index": 1}},
            {"keep": 1, "id": 3, "@metadata": {"split_index": 2}},
        ]

    def test_split_from_stdin(self) -> None:
        result = runner.invoke(app, ["split"], input='{"message": "a\\nb"}\n')

        assert result.exit_code == 0, result.output
        assert '{"message": "a"}' in result.output
        assert '{"message": "b"}' in result.output

    def test_unsplittable_field_exits_with_error(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        write_jsonl(source, {"message": 1})

        result = runner.invoke(app, ["split", str(source), "-o", str(tmp_path / "out.jsonl")])

        assert result.exit_code == 1
        assert "Only strings and sequences are splittable" in result.output

    def test_invalid_json_exits_with_error(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        source.write_text("not json\n")

        result = runner.invoke(app, ["split", str(source), "-o", str(tmp_path / "out.jsonl")])

        assert result.exit_code == 1
        assert "Line 1" in result.output

    def test_invalid_field_option(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        write_jsonl(source, {"message": "a"})

        result = runner.invoke(app, ["split", str(source), "--field", "[broken"])

        assert result.exit_code == 1
        assert "Invalid options" in result.output

    def test_log_level_from_environment(self, tmp_path, restore_logging) -> None:
        """EVENTSPLIT_LOG_LEVEL is read when the command runs."""
        source = tmp_path / "in.jsonl"
        write_jsonl(source, {"message": "a\nb"})

        result = runner.invoke(
            app,
            ["split", str(source), "-o", str(tmp_path / "out.jsonl")],
            env={"EVENTSPLIT_LOG_LEVEL": "debug"},
        )

        assert result.exit_code == 0, result.output
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    def test_log_level_option_overrides_environment(self, tmp_path, restore_logging) -> None:
        source = tmp_path / "in.jsonl"
        write_jsonl(source, {"message": "a"})

        result = runner.invoke(
            app,
            ["split", str(source), "--log-level", "ERROR", "-o", str(tmp_path / "out.jsonl")],
            env={"EVENTSPLIT_LOG_LEVEL": "DEBUG"},
        )

        assert result.exit_code == 0, result.output
        assert logging.getLogger(LOGGER_NAME).level == logging.ERROR


class TestRunCommand:
    """Tests for the run command."""

    def test_run_pipeline_from_settings(self, tmp_path) -> None:
        settings = tmp_path / "pipeline.yaml"
        settings.write_text(
            "filters:\n"
            "  - split:\n"
            "      field: events\n"
            "      target: event\n"
            "      delete_field: true\n"
            "      add_tag: [split]\n"
        )
        source = tmp_path / "in.jsonl"
        output = tmp_path / "out.jsonl"
        write_jsonl(source, {"events": ["a", "b"]})

        result = runner.invoke(app, ["run", str(settings), str(source), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert read_jsonl(output) == [
            {"event": "a", "tags": ["split"]},
            {"event": "b", "tags": ["split"]},
        ]

    def test_run_with_missing_settings(self, tmp_path) -> None:
        result = runner.invoke(app, ["run", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_run_with_unknown_filter(self, tmp_path) -> None:
        settings = tmp_path / "pipeline.yaml"
        settings.write_text("filters:\n  - grok: {}\n")

        result = runner.invoke(app, ["run", str(settings)], input="")

        assert result.exit_code == 1
        assert "Unknown filter: grok" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
