"""Tests for the find_definition tool (in-process strategy)."""

import os

from codeqa.tools.base import ToolContext
from codeqa.tools.find_definition import RESULT_LIMIT, build_definition_patterns, find_definition


class TestBuildDefinitionPatterns:
    """Template instantiation."""

    def test_include_narrows_to_language(self):
        patterns = build_definition_patterns("Order", "*.cs")
        assert patterns == [
            r"\b(class|interface|struct|enum|record|delegate)\s+Order\b",
            r"\b(namespace)\s+[\w.]*\.?Order\b",
        ]

    def test_unknown_include_uses_every_language(self):
        assert len(build_definition_patterns("Order", "*.rb")) == len(build_definition_patterns("Order"))

    def test_symbol_is_escaped(self):
        assert build_definition_patterns("a.b", "*.go")[0] == r"\btype\s+a\.b\s+"


class TestFindDefinition:
    """Search and rendering."""

    def test_widget_declaration(self, context):
        assert find_definition(context, "Widget") == (
            "Found 1 definition(s) for 'Widget':\n"
            "\n"
            "A.cs:1\n"
            "  class Widget { void Render() {} }\n"
        )

    def test_case_insensitive(self, context):
        assert "A.cs:1" in find_definition(context, "widget")

    def test_not_found(self, context):
        assert find_definition(context, "Gadget") == "No definitions found for 'Gadget'."

    def test_include_filter_excludes_other_languages(self, widget_repo, context):
        (widget_repo / "tools.py").write_text("def Widget():\n    pass\n")

        assert "tools.py" in find_definition(context, "Widget")
        assert "tools.py" not in find_definition(context, "Widget", "*.cs")

    def test_language_specific_forms(self, tmp_path):
        (tmp_path / "cart.ts").write_text("export const makeCart = () => {};\n")
        (tmp_path / "server.go").write_text("func (s *Server) Handle(w Writer) {\n}\n")
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        assert "cart.ts:1" in find_definition(context, "makeCart")
        assert "server.go:1" in find_definition(context, "Handle")

    def test_newest_first_and_truncated(self, tmp_path):
        for i in range(RESULT_LIMIT + 5):
            path = tmp_path / f"T{i:02d}.cs"
            path.write_text("public class Target {}\n")
            os.utime(path, (1_000_000 + i, 1_000_000 + i))
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        lines = find_definition(context, "Target").splitlines()

        assert lines[0] == f"Found {RESULT_LIMIT} definition(s) for 'Target':"
        assert lines[2] == f"T{RESULT_LIMIT + 4:02d}.cs:1"
        assert lines[-1] == "(Results truncated. Use the include filter to narrow the search.)"
