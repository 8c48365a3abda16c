"""Tests for the ripgrep adapter and the ripgrep-backed search paths."""

import subprocess
from unittest.mock import patch

import pytest

from codeqa.tools.base import ToolContext
from codeqa.tools.glob_search import glob_search
from codeqa.tools.grep_search import grep_search
from codeqa.tools.ripgrep import (
    RipgrepError,
    RipgrepLine,
    exclude_dir_globs,
    exclude_extension_globs,
    parse_match_lines,
    run_ripgrep,
)


def _completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=["rg"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseMatchLines:
    """``path|line|text`` records."""

    def test_parses_records(self):
        stdout = "/r/a.cs|3|class A { }\n/r/b.cs|10|x | y\n"
        assert list(parse_match_lines(stdout)) == [
            RipgrepLine("/r/a.cs", 3, "class A { }"),
            RipgrepLine("/r/b.cs", 10, "x | y"),
        ]

    def test_skips_malformed(self):
        assert list(parse_match_lines("garbage\n|1|x\n/r/a.cs|nan|x\n")) == []


class TestGlobArgs:
    def test_exclude_dir_globs(self):
        assert exclude_dir_globs(["obj", "bin"]) == ["--glob", "!**/bin/**", "--glob", "!**/obj/**"]

    def test_exclude_extension_globs(self):
        assert exclude_extension_globs([".md"]) == ["--glob", "!*.md"]


class TestRunRipgrep:
    """Process invocation and failure mapping."""

    @patch("codeqa.tools.ripgrep.shutil.which", return_value=None)
    def test_missing_binary(self, _which):
        with pytest.raises(RipgrepError):
            run_ripgrep(["--files"])

    @patch("codeqa.tools.ripgrep.subprocess.run", side_effect=subprocess.TimeoutExpired("rg", 30))
    @patch("codeqa.tools.ripgrep.shutil.which", return_value="/usr/bin/rg")
    def test_timeout(self, _which, _run):
        with pytest.raises(RipgrepError, match="timed out"):
            run_ripgrep(["--files"])

    @patch("codeqa.tools.ripgrep.subprocess.run", return_value=_completed("x"))
    @patch("codeqa.tools.ripgrep.shutil.which", return_value="/usr/bin/rg")
    def test_invokes_binary(self, _which, mock_run):
        run_ripgrep(["--files", "/r"])

        assert mock_run.call_args.args[0] == ["/usr/bin/rg", "--files", "/r"]
        assert mock_run.call_args.kwargs["check"] is False


class TestRipgrepBackedTools:
    """Tools parse ripgrep output and fall back when it fails."""

    @pytest.fixture
    def context(self, widget_repo):
        return ToolContext(root_path=str(widget_repo.resolve()), use_ripgrep=True)

    @patch("codeqa.tools.ripgrep.shutil.which", return_value="/usr/bin/rg")
    def test_grep_uses_ripgrep_output(self, _which, widget_repo, context):
        stdout = f"{widget_repo.resolve() / 'A.cs'}|1|class Widget {{ void Render() {{}} }}\n"
        with patch("codeqa.tools.ripgrep.subprocess.run", return_value=_completed(stdout)) as mock_run:
            output = grep_search(context, "Render", "*.cs")

        assert output.splitlines() == ["Found 1 matches:", "A.cs:", "  Line 1: class Widget { void Render() {} }"]
        args = mock_run.call_args.args[0]
        assert args[args.index("--glob") + 1] == "*.cs"
        assert args[-2:] == ["Render", str(widget_repo.resolve())]
        assert "-i" in args

    @patch("codeqa.tools.ripgrep.shutil.which", return_value="/usr/bin/rg")
    def test_grep_falls_back_on_ripgrep_error(self, _which, context):
        with patch(
            "codeqa.tools.ripgrep.subprocess.run",
            return_value=_completed("", returncode=2, stderr="regex parse error"),
        ):
            output = grep_search(context, "Render")

        assert output.splitlines()[:2] == ["Found 1 matches:", "A.cs:"]

    @patch("codeqa.tools.ripgrep.shutil.which", return_value="/usr/bin/rg")
    def test_glob_no_matches_exit_code(self, _which, context):
        with patch("codeqa.tools.ripgrep.subprocess.run", return_value=_completed("", returncode=1)):
            assert glob_search(context, "*.java") == "No files found."
