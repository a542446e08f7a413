#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli.py
"""Unit tests for the command-line interface."""

import io
import json
import logging
import sys

import pytest

from mdtranspile.cli import EXIT_ERROR, EXIT_FILE_ERROR, EXIT_SUCCESS, create_parser, main


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo the handler changes main() makes to the root logger."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def _stdin(monkeypatch, text):
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


@pytest.mark.unit
@pytest.mark.cli
class TestParser:
    """Tests for argument parsing."""

    def test_subcommands(self):
        parser = create_parser()
        args = parser.parse_args(["md2html", "in.md", "-o", "out.html", "--standalone", "--title", "T"])
        assert args.command == "md2html"
        assert args.input == "in.md"
        assert args.out == "out.html"
        assert args.standalone
        assert args.title == "T"

    def test_defaults(self):
        args = create_parser().parse_args(["html2md"])
        assert args.input is None
        assert args.emphasis_symbol == "*"
        assert not args.setext_headings
        assert args.log_level == "WARNING"

    def test_missing_command_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_json_and_rich_exclusive(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["extract", "--json", "--rich"])
        assert exc_info.value.code == 2

    def test_invalid_emphasis_symbol(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["html2md", "--emphasis-symbol", "+"])
        assert exc_info.value.code == 2


@pytest.mark.unit
@pytest.mark.cli
class TestMd2Html:
    """Tests for the md2html command."""

    def test_from_stdin(self, monkeypatch, capsys):
        _stdin(monkeypatch, "# Hello\n")
        assert main(["md2html"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<h1>Hello</h1>\n"

    def test_dash_reads_stdin(self, monkeypatch, capsys):
        _stdin(monkeypatch, "*x*\n")
        assert main(["md2html", "-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<p><em>x</em></p>\n"

    def test_from_file(self, markdown_file, capsys):
        assert main(["md2html", str(markdown_file)]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "<h1>" in out
        assert "<table>" in out
        assert "title:" not in out

    def test_standalone(self, markdown_file, capsys):
        assert main(["md2html", str(markdown_file), "--standalone", "--title", "Notes"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert "<title>Notes</title>" in out

    def test_keep_frontmatter(self, markdown_file, capsys):
        assert main(["md2html", str(markdown_file), "--keep-frontmatter"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.startswith("<!--")

    def test_no_raw_html(self, monkeypatch, capsys):
        _stdin(monkeypatch, "a <b>x</b>\n")
        assert main(["md2html", "--no-raw-html"]) == EXIT_SUCCESS
        assert "&lt;b&gt;" in capsys.readouterr().out

    def test_output_file(self, markdown_file, tmp_path, capsys):
        out_path = tmp_path / "nested" / "out.html"
        assert main(["md2html", str(markdown_file), "-o", str(out_path)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == ""
        assert "<h1>" in out_path.read_text(encoding="utf-8")

    def test_missing_file(self, tmp_path, capsys):
        assert main(["md2html", str(tmp_path / "absent.md")]) == EXIT_FILE_ERROR
        assert capsys.readouterr().err.startswith("Error:")


@pytest.mark.unit
@pytest.mark.cli
class TestHtml2Md:
    """Tests for the html2md command."""

    def test_from_stdin(self, monkeypatch, capsys):
        _stdin(monkeypatch, "<h2>Title</h2><p><em>x</em></p>")
        assert main(["html2md"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "## Title\n\n*x*\n"

    def test_renderer_flags(self, monkeypatch, capsys):
        _stdin(monkeypatch, "<h1>Title</h1><p><em>x</em></p>")
        assert main(["html2md", "--emphasis-symbol", "_", "--setext-headings"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Title\n=====\n\n_x_\n"


@pytest.mark.unit
@pytest.mark.cli
class TestExtract:
    """Tests for the extract command."""

    def test_plain(self, monkeypatch, capsys):
        _stdin(monkeypatch, "Hi *there*\n")
        assert main(["extract"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "0-3\t'Hi '\n4-9\t'there'\n"

    def test_json(self, monkeypatch, capsys):
        _stdin(monkeypatch, "Hello\n\n```\ncode\n```\n\nWorld\n")
        assert main(["extract", "--json"]) == EXIT_SUCCESS
        payload = json.loads(capsys.readouterr().out)
        assert [item["value"] for item in payload] == ["Hello", "World"]
        assert payload[0]["span"] == [0, 5]

    def test_rich(self, monkeypatch, capsys):
        pytest.importorskip("rich")
        _stdin(monkeypatch, "Hello\n")
        assert main(["extract", "--rich"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "0-5" in out
        assert "'Hello'" in out


@pytest.mark.unit
@pytest.mark.cli
class TestErrors:
    """Tests for error reporting and exit codes."""

    def test_conversion_error(self, monkeypatch, capsys):
        def fail(_source):
            from mdtranspile.exceptions import ParsingError

            raise ParsingError("broken input")

        monkeypatch.setattr("mdtranspile.cli.extract_text", fail)
        _stdin(monkeypatch, "x\n")
        assert main(["extract"]) == EXIT_ERROR
        assert "broken input" in capsys.readouterr().err

    def test_log_file(self, monkeypatch, tmp_path, capsys):
        log_path = tmp_path / "cli.log"
        _stdin(monkeypatch, "x\n")
        assert main(["--log-level", "INFO", "--log-file", str(log_path), "md2html"]) == EXIT_SUCCESS
        capsys.readouterr()
        logging.getLogger().handlers[-1].flush()
        assert "Logging to file" in log_path.read_text(encoding="utf-8")
