"""Tests for structural outline extraction."""

import pytest

from codeqa.tools.base import ToolContext
from codeqa.tools.file_outline import (
    CSHARP,
    GENERIC,
    TYPESCRIPT,
    extract_outline,
    get_file_outline,
    outline_braced,
    outline_python,
)


def _rows(symbols):
    return [(s.line, s.depth, s.signature) for s in symbols]


class TestCSharpOutline:
    """Namespaces, types and members."""

    def test_block_namespace_and_members(self):
        source = [
            "using System;",
            "namespace Shop.Orders",
            "{",
            "    [Serializable]",
            "    public class OrderService",
            "    {",
            "        private readonly IRepo _repo;",
            "        public OrderService(IRepo repo)",
            "        {",
            "            _repo = repo;",
            "        }",
            "        public void Submit(Order order) { }",
            "    }",
            "}",
        ]

        assert _rows(outline_braced(source, CSHARP)) == [
            (2, 0, "namespace Shop.Orders"),
            (5, 1, "public class OrderService"),
            (7, 2, "private readonly IRepo _repo;"),
            (8, 2, "public OrderService(IRepo repo)"),
            (12, 2, "public void Submit(Order order) { }"),
        ]

    def test_file_scoped_namespace_shifts_depth(self):
        source = [
            "namespace Shop;",
            "public enum Status {",
            "    Open,",
            "}",
        ]

        assert _rows(outline_braced(source, CSHARP)) == [
            (1, 0, "namespace Shop;"),
            (2, 1, "public enum Status"),
        ]

    def test_block_comments_skipped(self):
        source = [
            "/*",
            "public class Hidden {}",
            "*/",
            "public class Visible {}",
        ]

        assert [s.signature for s in outline_braced(source, CSHARP)] == ["public class Visible {}"]

    def test_single_line_class(self):
        assert _rows(outline_braced(["class Widget { void Render() {} }"], CSHARP)) == [
            (1, 0, "class Widget { void Render() {} }"),
        ]


class TestTypeScriptOutline:
    """Exports, class members and function bodies."""

    def test_class_members_listed_function_bodies_not(self):
        source = [
            "import { Item } from './item';",
            "export class Cart {",
            "  private items: Item[] = [];",
            "  add(item: Item) {",
            "    if (item) {",
            "      this.items.push(item);",
            "    }",
            "  }",
            "}",
            "",
            "export function total(cart: Cart): number {",
            "  return compute(cart);",
            "}",
        ]

        assert _rows(outline_braced(source, TYPESCRIPT)) == [
            (2, 0, "export class Cart"),
            (3, 1, "private items: Item[] = [];"),
            (4, 1, "add(item: Item)"),
            (11, 0, "export function total(cart: Cart): number"),
        ]


class TestPythonOutline:
    """Indentation-based scan."""

    def test_classes_methods_and_functions(self):
        source = [
            "import os",
            "",
            "class Greeter:",
            '    """Says hello.',
            "",
            "    def not_a_method(self):",
            '    """',
            "",
            "    def greet(self, name):",
            "        return name",
            "",
            "    async def agreet(self):",
            "        pass",
            "",
            "def helper():",
            "    def inner():",
            "        pass",
        ]

        assert _rows(outline_python(source)) == [
            (3, 0, "class Greeter:"),
            (9, 1, "def greet(self, name):"),
            (12, 1, "async def agreet(self):"),
            (15, 0, "def helper():"),
        ]

    def test_decorated_method_stays_in_class(self):
        source = [
            "@dataclass",
            "class Point:",
            "    @property",
            "    def norm(self):",
            "        return 0",
        ]

        assert _rows(outline_python(source)) == [(2, 0, "class Point:"), (4, 1, "def norm(self):")]


class TestJavaOutline:
    """Types and their members; method bodies are skipped."""

    def test_class_and_interface(self):
        source = [
            "package com.shop;",
            "",
            "import java.util.List;",
            "",
            "/**",
            " * Order handling.",
            " */",
            "@Service",
            "public class OrderService {",
            "    private final OrderRepository repository;",
            "",
            "    public OrderService(OrderRepository repository) {",
            "        this.repository = repository;",
            "    }",
            "",
            "    public List<Order> findAll() {",
            "        if (repository.isEmpty()) {",
            "            return List.of();",
            "        }",
            "        return repository.findAll();",
            "    }",
            "",
            "    enum Status { OPEN, CLOSED }",
            "}",
            "",
            "interface Auditable {",
            "    void audit(String reason);",
            "}",
        ]

        assert _rows(extract_outline("OrderService.java", source)) == [
            (9, 0, "public class OrderService"),
            (12, 1, "public OrderService(OrderRepository repository)"),
            (16, 1, "public List<Order> findAll()"),
            (23, 1, "enum Status { OPEN, CLOSED }"),
            (26, 0, "interface Auditable"),
            (27, 1, "void audit(String reason);"),
        ]


class TestGoOutline:
    """Top-level declarations only."""

    def test_types_functions_and_methods(self):
        source = [
            "package orders",
            "",
            "import (",
            '\t"fmt"',
            ")",
            "",
            "// Order is a purchase.",
            "type Order struct {",
            "\tID    int",
            "\tItems []string",
            "}",
            "",
            "type Store interface {",
            "\tFind(id int) (*Order, error)",
            "}",
            "",
            "const MaxItems = 50",
            "",
            "func NewOrder(id int) *Order {",
            "\tif id < 0 {",
            "\t\treturn nil",
            "\t}",
            "\treturn &Order{ID: id}",
            "}",
            "",
            "func (o *Order) Total() int {",
            "\ttotal := 0",
            "\tfor range o.Items {",
            "\t\ttotal++",
            "\t}",
            "\treturn total",
            "}",
        ]

        assert _rows(extract_outline("orders.go", source)) == [
            (8, 0, "type Order struct"),
            (13, 0, "type Store interface"),
            (17, 0, "const MaxItems = 50"),
            (19, 0, "func NewOrder(id int) *Order"),
            (26, 0, "func (o *Order) Total() int"),
        ]


class TestExtractOutline:
    """Dispatch by extension."""

    def test_unknown_extension_uses_generic_rules(self):
        source = ["pub fn main() {", "    let x = 1;", "}"]
        assert _rows(extract_outline("main.rs", source)) == _rows(outline_braced(source, GENERIC))
        assert _rows(extract_outline("main.rs", source)) == [(1, 0, "pub fn main()")]

    def test_python_dispatch(self):
        assert _rows(extract_outline("x.py", ["def f():", "    pass"])) == [(1, 0, "def f():")]


class TestGetFileOutline:
    """Rendered output."""

    @pytest.fixture
    def context(self, tmp_path):
        (tmp_path / "svc.py").write_text("class Svc:\n    def run(self):\n        pass\n")
        (tmp_path / "empty.cs").write_text("// nothing here\n")
        return ToolContext(root_path=str(tmp_path), use_ripgrep=False)

    def test_rendering(self, context):
        assert get_file_outline(context, "svc.py").splitlines() == [
            "File: svc.py (3 lines)",
            "",
            "    1: class Svc:",
            "    2:     def run(self):",
        ]

    def test_no_symbols(self, context):
        assert get_file_outline(context, "empty.cs").splitlines()[-1] == "(No structural elements detected)"

    def test_missing_file(self, context):
        assert get_file_outline(context, "nope.cs") == "Error: File not found: nope.cs"

    def test_long_signature_truncated(self, tmp_path):
        (tmp_path / "long.py").write_text("def f(" + "a, " * 100 + "b):\n    pass\n")
        context = ToolContext(root_path=str(tmp_path), use_ripgrep=False)

        line = get_file_outline(context, "long.py").splitlines()[2]

        assert line.endswith("...")
        assert len(line) == len("    1: ") + 120 + 3
