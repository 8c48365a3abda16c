"""Name-keyed tool registry."""

import json
from typing import Any, Iterable, Iterator

from .base import Tool
from .file_outline import FileOutlineTool
from .find_definition import FindDefinitionTool
from .glob_search import GlobTool
from .grep_search import GrepTool
from .list_directory import ListDirectoryTool
from .read_file import ReadFileTool
from .related_files import RelatedFilesTool


class ToolRegistry:
    """Lookup of tools by (case-insensitive) name.

    Registering a tool whose name is already present replaces the earlier one.
    """

    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        self._tools[tool.name.lower()] = tool

    def get(self, name: str | None) -> Tool | None:
        if not name:
            return None
        return self._tools.get(name.strip().lower())

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> list[str]:
        return [tool.name for tool in self._tools.values()]

    def get_tool_definitions(self) -> list[dict[str, Any]]:
        """Native function-calling definitions for every tool."""
        return [tool.to_openai_tool() for tool in self._tools.values()]

    def render_catalogue(self) -> str:
        """Plain-text description of every tool for the ReAct system prompt."""
        sections = []
        for tool in self._tools.values():
            sections.append(
                f"### {tool.name}\n"
                f"Description: {tool.description}\n"
                f"Parameters: {json.dumps(tool.parameters_schema())}\n"
            )
        return "\n".join(sections)


def create_default_registry() -> ToolRegistry:
    """Registry holding the seven exploration tools."""
    return ToolRegistry([
        ListDirectoryTool(),
        GlobTool(),
        GrepTool(),
        ReadFileTool(),
        FileOutlineTool(),
        FindDefinitionTool(),
        RelatedFilesTool(),
    ])
