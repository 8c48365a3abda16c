"""Glob evaluation for the in-process search strategies.

Patterns use gitwildmatch semantics (the same family ripgrep's ``--glob``
follows): ``*.cs`` matches at any depth, ``src/**/*.ts`` is anchored at the
root. Brace sets such as ``*.{ts,tsx}`` are expanded before compiling.
"""

import re
from pathlib import Path

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate patterns."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]

    head, tail = pattern[: match.start()], pattern[match.end():]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def compile_glob(pattern: str) -> PathSpec:
    """Compile a user glob (with brace sets) into a matcher."""
    pattern = pattern.strip()
    if pattern.startswith("./"):
        pattern = pattern[2:]
    return PathSpec.from_lines(GitWildMatchPattern, expand_braces(pattern))


def load_gitignore(root: Path) -> PathSpec | None:
    """Load root .gitignore patterns if present."""
    gitignore_path = root / ".gitignore"
    if not gitignore_path.is_file():
        return None

    try:
        patterns = gitignore_path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return None

    if not patterns:
        return None

    return PathSpec.from_lines(GitWildMatchPattern, patterns)
