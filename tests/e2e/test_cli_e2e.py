"""End-to-end tests for the mdtranspile command-line interface.

These tests run ``python -m mdtranspile`` in a subprocess, so they exercise
argument parsing, logging setup and exit codes exactly as a shell would.
"""

import json
import subprocess
import sys

import pytest


@pytest.mark.e2e
class TestCliEndToEnd:
    """Test suite for the CLI run as a separate process."""

    def _run_cli(self, args: list[str], stdin: str | None = None) -> subprocess.CompletedProcess:
        """Run the CLI with the given arguments.

        Parameters
        ----------
        args : list[str]
            Command-line arguments to pass to mdtranspile
        stdin : str, optional
            Text fed to the process on standard input

        Returns
        -------
        subprocess.CompletedProcess
            The result of the CLI execution

        """
        cmd = [sys.executable, "-m", "mdtranspile"] + args
        return subprocess.run(cmd, input=stdin, capture_output=True, text=True, encoding="utf-8")

    def test_version(self):
        result = self._run_cli(["--version"])
        assert result.returncode == 0
        assert result.stdout.startswith("mdtranspile ")

    def test_md2html_pipe(self):
        result = self._run_cli(["md2html"], stdin="# Hi\n")
        assert result.returncode == 0
        assert result.stdout == "<h1>Hi</h1>\n"

    def test_md2html_to_file(self, markdown_file, tmp_path):
        out_path = tmp_path / "out.html"
        result = self._run_cli(["md2html", str(markdown_file), "-o", str(out_path), "--standalone"])
        assert result.returncode == 0
        html = out_path.read_text(encoding="utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Sample</title>" in html

    def test_html2md_pipe(self):
        result = self._run_cli(["html2md"], stdin="<p><strong>bold</strong></p>")
        assert result.returncode == 0
        assert result.stdout == "**bold**\n"

    def test_extract_json(self, markdown_file):
        result = self._run_cli(["extract", str(markdown_file), "--json"])
        assert result.returncode == 0
        values = [item["value"] for item in json.loads(result.stdout)]
        assert "Heading" in values
        assert 'print("hi")' not in values

    def test_usage_error(self):
        result = self._run_cli(["convert"])
        assert result.returncode == 2

    def test_missing_file(self, tmp_path):
        result = self._run_cli(["extract", str(tmp_path / "absent.md")])
        assert result.returncode == 3
        assert "Error:" in result.stderr

    def test_trace_logging(self):
        result = self._run_cli(["--trace", "md2html"], stdin="x\n")
        assert result.returncode == 0
        assert "[DEBUG]" in result.stderr
