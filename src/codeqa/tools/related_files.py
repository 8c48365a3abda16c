"""Report a file's imports and the files that reference its exported names."""

import re
from dataclasses import dataclass
from pathlib import Path

from .base import Tool, ToolContext
from .filesystem import LocalFileBackend
from .languages import DEPENDENT_EXTENSIONS, language_for
from .schemas import RelatedFilesArgs, ToolArgs

MAX_DEPENDENTS = 20


@dataclass(frozen=True)
class ImportRules:
    """How to pull import targets out of one language's source.

    ``header_prefixes``, when set, stops the scan at the first non-blank line
    that starts with none of them (imports are grouped at the top).
    ``block_start``/``block_item`` handle parenthesised import groups.
    """

    patterns: tuple[re.Pattern, ...]
    header_prefixes: tuple[str, ...] | None = None
    block_start: str | None = None
    block_item: re.Pattern | None = None


IMPORT_RULES: dict[str, ImportRules] = {
    "cs": ImportRules(
        patterns=(re.compile(r"^\s*using\s+(?!static)([\w.]+)\s*;"),),
        header_prefixes=("using", "//", "#", "global"),
    ),
    "ts": ImportRules(
        patterns=(
            re.compile(r"^\s*import\s+.*?\s+from\s+['\"]([^'\"]+)['\"]"),
            re.compile(r"require\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
        ),
    ),
    "py": ImportRules(
        patterns=(re.compile(r"^\s*(?:from\s+([\w.]+)\s+import|import\s+([\w.]+))"),),
    ),
    "java": ImportRules(
        patterns=(re.compile(r"^\s*import\s+(?:static\s+)?([\w.]+)\s*;"),),
        header_prefixes=("import", "//", "package"),
    ),
    "go": ImportRules(
        patterns=(re.compile(r"^\s*import\s+(?:[\w.]+\s+)?\"([^\"]+)\""),),
        block_start="import (",
        block_item=re.compile(r"^\s*(?:[\w.]+\s+)?\"([^\"]+)\""),
    ),
}

EXPORT_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "cs": (
        re.compile(
            r"^\s*(?:(?:public|internal|file)\s+)?(?:(?:static|abstract|sealed|partial)\s+)*"
            r"(?:class|interface|struct|enum|record)\s+(\w+)"
        ),
    ),
    "ts": (
        re.compile(
            r"^\s*export\s+(?:default\s+)?(?:class|interface|type|enum|function|const|let|var|abstract\s+class)\s+(\w+)"
        ),
    ),
    "py": (
        re.compile(r"^\s*class\s+(\w+)"),
        re.compile(r"^(?:async\s+)?def\s+([A-Za-z]\w*)"),
    ),
    "java": (
        re.compile(
            r"^\s*(?:(?:public|private|protected)\s+)?(?:(?:static|abstract|final|sealed)\s+)*"
            r"(?:class|interface|enum|record|@interface)\s+(\w+)"
        ),
    ),
    "go": (
        re.compile(r"^\s*type\s+([A-Z]\w*)"),
        re.compile(r"^\s*func\s+([A-Z]\w*)\s*\("),
    ),
}


def _first_group(match: re.Match) -> str | None:
    return next((g for g in match.groups() if g), None)


def extract_imports(language: str | None, lines: list[str]) -> list[str]:
    """Import targets in source order."""
    rules = IMPORT_RULES.get(language or "")
    if rules is None:
        return []

    imports: list[str] = []
    in_block = False
    for line in lines:
        trimmed = line.strip()

        if in_block:
            if trimmed.startswith(")"):
                in_block = False
                continue
            match = rules.block_item.match(trimmed) if rules.block_item else None
            if match:
                imports.append(match.group(1))
            continue

        if rules.block_start and trimmed.startswith(rules.block_start):
            in_block = True
            continue

        for pattern in rules.patterns:
            match = pattern.search(line)
            if match and _first_group(match):
                imports.append(_first_group(match))
                break

        if rules.header_prefixes is not None and trimmed and not trimmed.startswith(rules.header_prefixes):
            break

    return imports


def extract_export_names(language: str | None, lines: list[str]) -> list[str]:
    """Candidate type/function names other files might reference."""
    names: list[str] = []
    for line in lines:
        for pattern in EXPORT_PATTERNS.get(language or "", ()):
            match = pattern.match(line)
            if match and match.group(1) not in names:
                names.append(match.group(1))
    return names


def find_dependents(backend: LocalFileBackend, names: list[str], source: Path) -> list[str]:
    """Files whose text contains any of ``names`` (plain substring match)."""
    dependents: list[str] = []
    for path in backend.walk_files(extensions=DEPENDENT_EXTENSIONS):
        if path.resolve() == source:
            continue
        try:
            content = backend.read_text(path)
        except OSError:
            continue
        if any(name in content for name in names):
            dependents.append(backend.relative(path))
            if len(dependents) >= MAX_DEPENDENTS:
                break
    return sorted(dependents)


def get_related_files(context: ToolContext, file_path: str) -> str:
    """Two-section report of dependencies and dependents for ``file_path``."""
    backend = context.files
    path = backend.resolve(file_path)
    if not path.is_file():
        return f"Error: File not found: {file_path}"

    lines = backend.read_lines(path)
    language = language_for(path)

    output = [f"File: {backend.relative(path)}", "", "── Dependencies (this file imports/uses) ──"]
    imports = extract_imports(language, lines)
    if imports:
        output.extend(f"  {name}" for name in imports)
    else:
        output.append("  (none detected)")

    output.append("")
    output.append("── Dependents (files that reference this file) ──")
    names = extract_export_names(language, lines)
    if not names:
        output.append("  (no exported types detected to search for)")
    else:
        dependents = find_dependents(backend, names, path)
        if dependents:
            output.extend(f"  {rel_path}" for rel_path in dependents)
        else:
            output.append("  (no dependents found)")

    return "\n".join(output) + "\n"


class RelatedFilesTool(Tool):
    name: str = "get_related_files"
    description: str = (
        "Given a file path, find its related files: "
        "(1) dependencies, the files/modules it imports or uses, and "
        "(2) dependents, the files that reference types or exports defined in this file. "
        "Helps you understand code relationships without multiple grep calls."
    )
    args_schema: type[ToolArgs] = RelatedFilesArgs

    def _explore(self, args: RelatedFilesArgs, context: ToolContext) -> str:
        return get_related_files(context, args.file_path)
