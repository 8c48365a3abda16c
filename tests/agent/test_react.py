"""Tests for the ReAct text protocol helpers."""

import json

from codeqa.agent.react import extract_thinking_text, format_tool_results, has_tool_calls, parse_tool_calls


class TestParseToolCalls:
    """Extraction of <tool_call> blocks."""

    def test_single_call(self):
        text = 'Let me look.\n<tool_call>\n{"name": "grep_search", "arguments": {"pattern": "Order"}}\n</tool_call>'
        calls = parse_tool_calls(text)

        assert len(calls) == 1
        assert calls[0].function_name == "grep_search"
        assert json.loads(calls[0].arguments_json) == {"pattern": "Order"}
        assert calls[0].call_id is None

    def test_multiple_calls_keep_order(self):
        text = (
            '<tool_call>{"name": "glob_search", "arguments": {"pattern": "*.cs"}}</tool_call>'
            '<tool_call>{"name": "read_file", "arguments": {"file_path": "A.cs"}}</tool_call>'
        )
        assert [c.function_name for c in parse_tool_calls(text)] == ["glob_search", "read_file"]

    def test_malformed_blocks_dropped(self):
        text = (
            "<tool_call>{not json}</tool_call>"
            '<tool_call>{"arguments": {}}</tool_call>'
            '<tool_call>{"name": "  "}</tool_call>'
            '<tool_call>{"name": "list_directory"}</tool_call>'
        )
        calls = parse_tool_calls(text)

        assert [c.function_name for c in calls] == ["list_directory"]
        assert calls[0].arguments_json == "{}"

    def test_unterminated_json_does_not_swallow_next_block(self):
        text = (
            '<tool_call>{"name": "grep_search", "arguments": </tool_call>\n'
            '<tool_call>{"name": "list_directory", "arguments": {}}</tool_call>'
        )
        assert [c.function_name for c in parse_tool_calls(text)] == ["list_directory"]
        assert has_tool_calls(text)

    def test_only_malformed_blocks(self):
        text = '<tool_call>{"name": "grep_search", "arguments": </tool_call>'
        assert parse_tool_calls(text) == []
        assert not has_tool_calls(text)

    def test_string_arguments_passed_through(self):
        text = '<tool_call>{"name": "read_file", "arguments": "{\\"file_path\\": \\"A.cs\\"}"}</tool_call>'
        assert parse_tool_calls(text)[0].arguments_json == '{"file_path": "A.cs"}'

    def test_plain_text_has_no_calls(self):
        assert parse_tool_calls("The answer is 42.") == []
        assert not has_tool_calls("The answer is 42.")
        assert parse_tool_calls(None) == []


class TestHelpers:
    def test_extract_thinking_text(self):
        text = 'I will search.\n<tool_call>{"name": "grep_search"}</tool_call>\n'
        assert extract_thinking_text(text) == "I will search."

    def test_extract_thinking_text_strips_malformed_blocks_separately(self):
        text = (
            "Checking.\n"
            '<tool_call>{"name": "grep_search", "arguments": </tool_call>\n'
            "Then listing.\n"
            '<tool_call>{"name": "list_directory"}</tool_call>'
        )
        assert extract_thinking_text(text) == "Checking.\n\nThen listing."

    def test_format_tool_results(self):
        assert format_tool_results([("glob_search", "No files found."), ("read_file", "x")]) == (
            '<tool_result name="glob_search">\nNo files found.\n</tool_result>'
            "\n\n"
            '<tool_result name="read_file">\nx\n</tool_result>'
        )
