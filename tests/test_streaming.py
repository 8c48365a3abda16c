"""Tests for console rendering of progress events."""

from rich.console import Console

from codeqa.models import AgentEvent, AgentEventType, AgentRunResult
from codeqa.streaming import MAX_DETAIL_ITEMS, ConsoleEventPrinter


def _printer(verbose=False):
    console = Console(record=True, width=120)
    return ConsoleEventPrinter(console, verbose=verbose), console


class TestConsoleEventPrinter:
    def test_tool_call_lines(self):
        printer, console = _printer()
        printer(AgentEvent(type=AgentEventType.TOOL_CALL_START, tool_name="grep_search", tool_args="pattern=Order"))
        printer(AgentEvent(
            type=AgentEventType.TOOL_CALL_END,
            tool_name="grep_search",
            result_summary="3 matches in 2 files",
            duration_ms=12,
        ))

        text = console.export_text()
        assert "→ grep_search pattern=Order" in text
        assert "✓ grep_search: 3 matches in 2 files (12ms)" in text

    def test_error_result(self):
        printer, console = _printer()
        printer(AgentEvent(type=AgentEventType.TOOL_CALL_END, tool_name="read_file", result_summary="Error: File not found: x"))

        assert "✗ read_file failed: Error: File not found: x" in console.export_text()

    def test_verbose_detail_items_capped(self):
        printer, console = _printer(verbose=True)
        items = [f"file{i}.cs" for i in range(MAX_DETAIL_ITEMS + 2)]
        printer(AgentEvent(
            type=AgentEventType.TOOL_CALL_END,
            tool_name="glob_search",
            result_summary="12 files",
            detail_items=items,
            detail_label="Found Files",
        ))

        text = console.export_text()
        assert "Found Files:" in text
        assert f"file{MAX_DETAIL_ITEMS - 1}.cs" in text
        assert f"file{MAX_DETAIL_ITEMS}.cs" not in text
        assert "... and 2 more" in text

    def test_finished_with_usage(self):
        printer, console = _printer(verbose=True)
        result = AgentRunResult(answer="x", iteration_count=2, input_tokens=40, output_tokens=7)
        printer(AgentEvent(type=AgentEventType.ANSWER, iteration=2, total_tool_calls=1, result=result))

        text = console.export_text()
        assert "Exploration complete" in text
        assert '"input_tokens": 40' in text

    def test_run_error(self):
        printer, console = _printer()
        printer(AgentEvent(type=AgentEventType.ERROR, summary="rate limited"))

        assert "Agent run failed: rate limited" in console.export_text()
