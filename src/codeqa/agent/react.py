"""Text protocol for models without native function calling.

The model requests a tool by emitting::

    <tool_call>
    {"name": "grep_search", "arguments": {"pattern": "Order"}}
    </tool_call>

A response with no well-formed block is the final answer.
"""

import json
import re
from typing import Iterable

from ..models import ToolCallRequest

TOOL_CALL_RE = re.compile(r"<tool_call>(.*?)</tool_call>", re.DOTALL)


def parse_tool_calls(text: str) -> list[ToolCallRequest]:
    """Extract tool calls in order, silently dropping malformed blocks."""
    calls: list[ToolCallRequest] = []
    for match in TOOL_CALL_RE.finditer(text or ""):
        try:
            payload = json.loads(match.group(1).strip())
        except json.JSONDecodeError:
            continue
        if not isinstance(payload, dict):
            continue

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            continue

        arguments = payload.get("arguments", {})
        arguments_json = arguments if isinstance(arguments, str) else json.dumps(arguments)
        calls.append(ToolCallRequest(function_name=name.strip(), arguments_json=arguments_json))
    return calls


def has_tool_calls(text: str) -> bool:
    """Whether ``text`` holds at least one well-formed tool-call block."""
    return bool(parse_tool_calls(text))


def extract_thinking_text(text: str) -> str:
    """The response with every tool-call block removed."""
    return TOOL_CALL_RE.sub("", text or "").strip()


def format_tool_results(results: Iterable[tuple[str, str]]) -> str:
    """Serialize ``(tool name, result)`` pairs for the next user turn."""
    return "\n\n".join(
        f'<tool_result name="{name}">\n{result}\n</tool_result>' for name, result in results
    )
