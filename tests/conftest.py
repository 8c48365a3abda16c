"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any, Sequence

import pytest
from langchain_core.messages import BaseMessage

from codeqa.config import Config
from codeqa.llm.provider import ChatProvider, ChatResponse
from codeqa.models import ToolCallRequest
from codeqa.tools.base import ToolContext


@pytest.fixture
def widget_repo(tmp_path: Path) -> Path:
    """Two C# files: A.cs declares Widget, B.cs uses it."""
    repo = tmp_path / "widget_repo"
    repo.mkdir()
    (repo / "A.cs").write_text("class Widget { void Render() {} }\n")
    (repo / "B.cs").write_text("class Consumer { Widget widget = new Widget(); }\n")
    return repo


@pytest.fixture
def context(widget_repo: Path) -> ToolContext:
    """Tool context forced onto the in-process search strategy."""
    return ToolContext(root_path=str(widget_repo.resolve()), use_ripgrep=False)


@pytest.fixture
def config() -> Config:
    """Provide a test configuration."""
    return Config(
        llm_provider="litellm",
        model_name="gpt-4o-mini",
        api_key="test-key",
    )


class ScriptedProvider(ChatProvider):
    """Chat provider that replays canned responses and records every request.

    ``responses`` items may be ChatResponse objects or exceptions to raise.
    Once the script is exhausted the last item is repeated.
    """

    def __init__(self, responses: list, supports_tool_calling: bool = True):
        self.name = "scripted"
        self.supports_tool_calling = supports_tool_calling
        self.responses = list(responses)
        self.requests: list[list[BaseMessage]] = []
        self.tools_seen: list[list[dict[str, Any]]] = []

    def _next(self, messages: Sequence[BaseMessage]) -> ChatResponse:
        self.requests.append(list(messages))
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item.model_copy(deep=True)

    def chat_with_tools(self, messages, tools):
        self.tools_seen.append(tools)
        return self._next(messages)

    def chat(self, messages):
        return self._next(messages)


@pytest.fixture
def scripted_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider


@pytest.fixture
def make_tool_call():
    """Factory for native tool call requests."""

    def _make(name: str, arguments: str = "{}", call_id: str | None = None) -> ToolCallRequest:
        return ToolCallRequest(call_id=call_id or f"call_{name}", function_name=name, arguments_json=arguments)

    return _make
