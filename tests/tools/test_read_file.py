"""Tests for the read_file tool."""

import json
import re

import pytest

from codeqa.tools.base import ToolContext
from codeqa.tools.read_file import MAX_OUTPUT_BYTES, ReadFileTool, read_file


class TestReadFile:
    """Pagination and the terminal annotation."""

    @pytest.fixture
    def repo(self, tmp_path):
        (tmp_path / "ten.py").write_text("\n".join(f"line {i}" for i in range(1, 11)) + "\n")
        return tmp_path

    @pytest.fixture
    def context(self, repo):
        return ToolContext(root_path=str(repo), use_ripgrep=False)

    def test_whole_file(self, context):
        lines = read_file(context, "ten.py").splitlines()

        assert lines[0] == "File: ten.py (10 total lines)"
        assert lines[1] == ""
        assert lines[2] == "    1| line 1"
        assert lines[11] == "   10| line 10"
        assert lines[-1] == "(End of file — 10 total lines)"

    def test_more_lines_annotation(self, context):
        output = read_file(context, "ten.py", offset=2, max_lines=3)
        lines = output.splitlines()

        assert lines[2:5] == ["    3| line 3", "    4| line 4", "    5| line 5"]
        assert lines[-1] == "(File has 5 more lines. Use offset=5 to continue reading.)"

    def test_offset_past_end(self, context):
        lines = read_file(context, "ten.py", offset=50).splitlines()

        assert lines == ["File: ten.py (10 total lines)", "", "", "(End of file — 10 total lines)"]

    def test_byte_budget(self, tmp_path):
        (tmp_path / "wide.py").write_text(("y" * 1000 + "\n") * 100)
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        output = read_file(context, "wide.py")
        shown = [line for line in output.splitlines() if "| " in line]

        assert output.splitlines()[-1] == f"(Output truncated at 50KB. Use offset={len(shown)} to continue reading.)"
        assert sum(len(line) + 1 for line in shown) <= MAX_OUTPUT_BYTES
        assert "more lines" not in output

    def test_binary_file(self, tmp_path):
        (tmp_path / "logo.png").write_bytes(b"\x89PNG")
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        assert read_file(context, "logo.png") == "[Binary file: logo.png]"

    def test_missing_file(self, context):
        assert read_file(context, "missing.py") == "Error: File not found: missing.py"

    def test_absolute_path(self, repo, context):
        output = read_file(context, str(repo / "ten.py"), max_lines=1)
        assert output.startswith("File: ten.py (10 total lines)")

    def test_negative_offset_rejected(self, context):
        output = ReadFileTool().execute(json.dumps({"file_path": "ten.py", "offset": -1}), context)
        assert output.startswith("Error: Invalid arguments for read_file: offset")

    def test_zero_max_lines_rejected(self, context):
        output = ReadFileTool().execute(json.dumps({"file_path": "ten.py", "max_lines": 0}), context)
        assert output.startswith("Error: Invalid arguments for read_file: max_lines")

    def test_missing_file_path(self, context):
        assert ReadFileTool().execute("{}", context) == "Error: file_path is required"


def _page_through(context, file_path, max_lines):
    """Follow continuation annotations until end of file, returning shown line numbers."""
    seen = []
    offset = 0
    for _ in range(100):
        output = read_file(context, file_path, offset=offset, max_lines=max_lines)
        seen.extend(int(line.split("|")[0]) for line in output.splitlines() if "| " in line)
        continuation = re.search(r"Use offset=(\d+) to continue reading", output)
        if continuation is None:
            assert output.splitlines()[-1].startswith("(End of file")
            return seen
        offset = int(continuation.group(1))
    raise AssertionError("paging did not reach end of file")


class TestReadFilePaging:
    """Following the continuation offset covers every line exactly once."""

    def test_line_budget_pages(self, tmp_path):
        (tmp_path / "long.py").write_text("\n".join(f"line {i}" for i in range(1, 24)) + "\n")
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        assert _page_through(context, "long.py", max_lines=5) == list(range(1, 24))

    def test_byte_budget_pages(self, tmp_path):
        (tmp_path / "wide.py").write_text(("z" * 1500 + "\n") * 90)
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        assert _page_through(context, "wide.py", max_lines=500) == list(range(1, 91))
