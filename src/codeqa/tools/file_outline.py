"""Structural outline extraction (types, members, functions) without bodies.

Each language is described by a table of line rules. Brace languages share a
single forward scan that counts ``{``/``}`` per physical line, skips comment
blocks, and evaluates only lines at structural depth 0 or 1. Python is
scanned by indentation instead.
"""

import re
from dataclasses import dataclass, field

from ..models import OutlineSymbol
from .base import Tool, ToolContext
from .languages import language_for
from .schemas import FileOutlineArgs, ToolArgs

MAX_SIGNATURE_LENGTH = 120
PYTHON_INDENT_WIDTH = 4


@dataclass(frozen=True)
class OutlineRule:
    """A declaration pattern.

    ``container`` marks declarations whose block holds members worth listing
    (classes, interfaces); ``reject`` lists substrings that disqualify a line.
    """

    pattern: re.Pattern
    container: bool = False
    reject: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        return bool(self.pattern.match(text)) and not any(r in text for r in self.reject)


@dataclass(frozen=True)
class BraceLanguage:
    top_level: tuple[OutlineRule, ...]
    members: tuple[OutlineRule, ...] = ()
    skip_prefixes: tuple[str, ...] = ("//",)
    skip_patterns: tuple[re.Pattern, ...] = field(default_factory=tuple)
    namespace: re.Pattern | None = None
    block_comments: bool = True
    members_need_container: bool = True


def _rule(pattern: str, **kwargs) -> OutlineRule:
    return OutlineRule(re.compile(pattern), **kwargs)


_CS_TYPE = _rule(
    r"^\s*(?:(?:public|private|protected|internal|static|abstract|sealed|partial|file|new|readonly|ref)\s+)*"
    r"(class|interface|struct|enum|record)\b",
    container=True,
)
_CS_DELEGATE = _rule(r"^\s*(?:(?:public|private|protected|internal)\s+)*delegate\s+")

CSHARP = BraceLanguage(
    namespace=re.compile(r"^\s*namespace\s+[\w.]+"),
    top_level=(_CS_TYPE, _CS_DELEGATE),
    members=(
        _CS_TYPE,
        _rule(r"^\s*(?:(?:public|private|protected|internal|static|new)\s+)*event\s+"),
        _CS_DELEGATE,
        _rule(
            r"^\s*(?:(?:public|private|protected|internal|static|abstract|async|override|virtual|new|extern|unsafe|sealed|partial)\s+)*"
            r"[\w<>\[\]?,.\s]+\s+\w+\s*(<[^>]*>)?\s*\("
        ),
        _rule(
            r"^\s*(?:(?:public|private|protected|internal|static|abstract|override|virtual|new|required|readonly)\s+)*"
            r"[\w<>\[\]?,.\s]+\s+\w+\s*(=>|\{)",
            reject=("(",),
        ),
        _rule(
            r"^\s*(?:(?:public|private|protected|internal|static|readonly|volatile|const|new|required)\s+)+"
            r"[\w<>\[\]?,.\s]+\s+\w+",
            reject=("(", "=>"),
        ),
    ),
    skip_prefixes=("//", "#"),
    skip_patterns=(
        re.compile(r"^\[.*\],?$"),  # attributes
        re.compile(r"^using\s+.*(;|=)"),  # using directives
    ),
)

TYPESCRIPT = BraceLanguage(
    top_level=(
        _rule(r"^\s*(?:export\s+)?(?:abstract\s+)?(?:default\s+)?class\s+\w+", container=True),
        _rule(r"^\s*(?:export\s+)?(?:default\s+)?(?:interface|enum)\s+\w+", container=True),
        _rule(r"^\s*(?:export\s+)?(?:default\s+)?type\s+\w+"),
        _rule(r"^\s*(?:export\s+)?(?:async\s+)?(?:default\s+)?function\s+\w+"),
        _rule(r"^\s*(?:export\s+)?(?:const|let|var)\s+\w+\s*=\s*(?:async\s+)?(?:\(|<)"),
    ),
    members=(
        _rule(r"^\s*(?:public|private|protected|static|async|abstract|readonly|get|set|override)\s+"),
        _rule(r"^constructor\b"),
        _rule(r"^(?!(?:if|for|while|switch|catch|return|else|do|try|with)\b)\w+\s*[\(<]"),
    ),
    skip_prefixes=("//", "@", "import ", "from "),
)

_JAVA_TYPE = _rule(
    r"^\s*(?:(?:public|private|protected|static|abstract|final|sealed)\s+)*"
    r"(?:class|interface|enum|record|@interface)\s+\w+",
    container=True,
)

JAVA = BraceLanguage(
    top_level=(_JAVA_TYPE,),
    members=(
        _JAVA_TYPE,
        _rule(
            r"^\s*(?:(?:public|private|protected|static|abstract|final|synchronized|native|default|override)\s+)*"
            r"[\w<>\[\]?,.\s]+\s+\w+\s*\("
        ),
    ),
    skip_prefixes=("//", "@", "import ", "package "),
)

GO = BraceLanguage(
    top_level=(
        _rule(r"^\s*func\s+(?:\([^)]*\)\s+)?(\w+)\s*\("),
        _rule(r"^\s*type\s+\w+\s+(struct|interface|int|string|float|bool|\[|map|func|chan)"),
        _rule(r"^\s*type\s+\w+\s+=?\s*\w+"),
        _rule(r"^\s*(?:var|const)\s+\w+"),
    ),
    skip_prefixes=("//", "import ", "package "),
)

_GENERIC_RULE = _rule(
    r"^\s*(?:(?:pub(?:lic)?|priv(?:ate)?|prot(?:ected)?|export|default|static|abstract|"
    r"async|const|final|sealed|override|fn|func|fun|def|sub|function|class|struct|"
    r"trait|impl|interface|enum|type|module|object|record|data)\s+)"
)

GENERIC = BraceLanguage(
    top_level=(_GENERIC_RULE,),
    members=(_GENERIC_RULE,),
    skip_prefixes=("//", "#", "--"),
    block_comments=False,
    members_need_container=False,
)

BRACE_LANGUAGES: dict[str, BraceLanguage] = {
    "cs": CSHARP,
    "ts": TYPESCRIPT,
    "java": JAVA,
    "go": GO,
}

_PY_CLASS = re.compile(r"^\s*class\s+\w+")
_PY_FUNCTION = re.compile(r"^\s*(?:async\s+)?def\s+\w+")


def clean_signature(line: str) -> str:
    """Single-line declaration text without a trailing opening brace."""
    signature = line.strip()
    if signature.endswith("{"):
        signature = signature[:-1].rstrip()
    return signature


def _first_match(rules: tuple[OutlineRule, ...], text: str) -> OutlineRule | None:
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def _settle_namespaces(namespaces: list[list], depth: int) -> None:
    """Mark namespace blocks as opened and drop the ones that have closed."""
    while namespaces:
        entry = namespaces[-1]
        if depth > entry[0]:
            entry[1] = True
            return
        if not entry[1]:
            return
        namespaces.pop()


def outline_braced(lines: list[str], language: BraceLanguage) -> list[OutlineSymbol]:
    """Scan a brace-delimited source file.

    Namespace blocks are transparent: their contents count as file scope for
    structural purposes but are rendered one level deeper. A file-scoped
    namespace (``namespace X;``) shifts every later symbol one level deeper.
    """
    symbols: list[OutlineSymbol] = []
    depth = 0
    in_comment = False
    file_scoped = False
    in_container = False
    namespaces: list[list] = []  # [depth before the namespace, block opened]

    for number, line in enumerate(lines, start=1):
        trimmed = line.strip()

        if in_comment:
            if "*/" in trimmed:
                in_comment = False
            continue
        if language.block_comments and trimmed.startswith("/*"):
            if "*/" not in trimmed:
                in_comment = True
            continue
        if not trimmed or trimmed.startswith(language.skip_prefixes):
            continue
        if any(p.match(trimmed) for p in language.skip_patterns):
            continue

        start = depth
        depth = max(depth + line.count("{") - line.count("}"), 0)
        enclosing = len(namespaces)
        _settle_namespaces(namespaces, depth)

        structural = start - enclosing
        if structural < 0 or structural > 1:
            continue
        if trimmed.startswith("}") or trimmed == "{":
            continue

        offset = enclosing + (1 if file_scoped else 0)

        if structural == 0:
            if language.namespace is not None and language.namespace.match(trimmed):
                symbols.append(OutlineSymbol(line=number, depth=offset, signature=clean_signature(trimmed)))
                if trimmed.endswith(";"):
                    file_scoped = True
                else:
                    namespaces.append([start, False])
                    _settle_namespaces(namespaces, depth)
                continue

            rule = _first_match(language.top_level, trimmed)
            in_container = rule is not None and rule.container
            if rule is not None:
                symbols.append(OutlineSymbol(line=number, depth=offset, signature=clean_signature(trimmed)))
            continue

        if in_container or not language.members_need_container:
            if _first_match(language.members, trimmed) is not None:
                symbols.append(
                    OutlineSymbol(line=number, depth=offset + 1, signature=clean_signature(trimmed))
                )

    return symbols


def outline_python(lines: list[str]) -> list[OutlineSymbol]:
    """Scan Python source by indentation; methods are listed only inside classes."""
    symbols: list[OutlineSymbol] = []
    in_string = False
    in_class = False

    for number, raw in enumerate(lines, start=1):
        line = raw.expandtabs(PYTHON_INDENT_WIDTH)
        trimmed = line.strip()

        triple_quotes = line.count('"""') + line.count("'''")
        if in_string:
            if triple_quotes % 2 == 1:
                in_string = False
            continue
        if triple_quotes % 2 == 1:
            in_string = True
            continue

        if not trimmed or trimmed.startswith("#"):
            continue
        if trimmed.startswith(("import ", "from ")):
            continue

        depth = (len(line) - len(line.lstrip())) // PYTHON_INDENT_WIDTH
        is_class = bool(_PY_CLASS.match(trimmed))
        is_symbol = is_class or bool(_PY_FUNCTION.match(trimmed))

        if depth == 0:
            if not trimmed.startswith("@"):
                in_class = is_class
            if is_symbol:
                symbols.append(OutlineSymbol(line=number, depth=0, signature=clean_signature(trimmed)))
        elif depth == 1 and in_class and is_symbol:
            symbols.append(OutlineSymbol(line=number, depth=1, signature=clean_signature(trimmed)))

    return symbols


def extract_outline(path: str, lines: list[str]) -> list[OutlineSymbol]:
    """Pick the scanner for ``path`` by extension and run it."""
    language = language_for(path)
    if language == "py":
        return outline_python(lines)
    return outline_braced(lines, BRACE_LANGUAGES.get(language, GENERIC))


def get_file_outline(context: ToolContext, file_path: str) -> str:
    """Render the outline of ``file_path``."""
    backend = context.files
    path = backend.resolve(file_path)
    if not path.is_file():
        return f"Error: File not found: {file_path}"

    lines = backend.read_lines(path)
    symbols = extract_outline(path.name, lines)

    output = [f"File: {backend.relative(path)} ({len(lines)} lines)", ""]
    if not symbols:
        output.append("(No structural elements detected)")
        return "\n".join(output)

    for symbol in symbols:
        signature = symbol.signature
        if len(signature) > MAX_SIGNATURE_LENGTH:
            signature = signature[:MAX_SIGNATURE_LENGTH] + "..."
        output.append(f"{symbol.line:>5}: {'    ' * symbol.depth}{signature}")
    return "\n".join(output)


class FileOutlineTool(Tool):
    name: str = "get_file_outline"
    description: str = (
        "Get the structural outline of a code file: classes, methods, properties, interfaces, "
        "enums, and functions with their line numbers and signatures. "
        "Does NOT return implementation bodies, making it much more token-efficient than read_file "
        "when you need to understand a file's structure. "
        "Use this before read_file to know exactly which lines to read."
    )
    args_schema: type[ToolArgs] = FileOutlineArgs

    def _explore(self, args: FileOutlineArgs, context: ToolContext) -> str:
        return get_file_outline(context, args.file_path)
