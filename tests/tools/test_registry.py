"""Tests for the tool registry."""

import json

from codeqa.tools.base import Tool
from codeqa.tools.registry import ToolRegistry, create_default_registry
from codeqa.tools.schemas import GlobArgs, ToolArgs

EXPECTED_TOOLS = [
    "list_directory",
    "glob_search",
    "grep_search",
    "read_file",
    "get_file_outline",
    "find_definition",
    "get_related_files",
]


class EchoTool(Tool):
    name: str = "glob_search"
    description: str = "Echo the pattern."
    args_schema: type[ToolArgs] = GlobArgs

    def _explore(self, args, context):
        return args.pattern


class TestToolRegistry:
    """Lookup and schema export."""

    def test_default_registry_has_seven_tools(self):
        registry = create_default_registry()
        assert registry.names == EXPECTED_TOOLS
        assert len(registry) == 7

    def test_lookup_is_case_insensitive(self):
        registry = create_default_registry()
        assert registry.get("Read_File").name == "read_file"
        assert " GREP_SEARCH " in registry
        assert registry.get("unknown") is None
        assert registry.get(None) is None

    def test_later_registration_replaces_earlier(self):
        registry = create_default_registry()
        registry.register(EchoTool())

        assert isinstance(registry.get("glob_search"), EchoTool)
        assert len(registry) == 7

    def test_tool_definitions(self):
        definitions = create_default_registry().get_tool_definitions()
        read_file = next(d for d in definitions if d["function"]["name"] == "read_file")

        assert read_file["type"] == "function"
        parameters = read_file["function"]["parameters"]
        assert parameters["type"] == "object"
        assert parameters["required"] == ["file_path"]
        assert parameters["properties"]["offset"]["type"] == "integer"
        assert "title" not in parameters["properties"]["offset"]

    def test_catalogue(self):
        catalogue = create_default_registry().render_catalogue()

        assert catalogue.startswith("### list_directory\nDescription: ")
        for name in EXPECTED_TOOLS:
            assert f"### {name}\n" in catalogue
        grep_section = catalogue.split("### grep_search\n")[1].split("###")[0]
        params = json.loads(grep_section.split("Parameters: ")[1].strip())
        assert params["required"] == ["pattern"]
