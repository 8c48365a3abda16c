"""Locate the definition site of a symbol across languages."""

import logging
import re

from .base import Tool, ToolContext
from .globbing import compile_glob
from .languages import (
    DOCUMENTATION_EXTENSIONS,
    EXCLUDED_DIRS,
    LANGUAGE_BY_EXTENSION,
    extension_of,
    language_for_include,
)
from .ripgrep import (
    EXIT_NO_MATCHES,
    FIELD_SEPARATOR,
    RipgrepError,
    exclude_dir_globs,
    exclude_extension_globs,
    find_ripgrep,
    parse_match_lines,
    run_ripgrep,
)
from .schemas import FindDefinitionArgs, ToolArgs
from .search import MatchCollector, truncate_text

logger = logging.getLogger(__name__)

RESULT_LIMIT = 20
MAX_SIGNATURE_LENGTH = 200

# {0} is replaced with the escaped symbol name
DEFINITION_PATTERNS: dict[str, tuple[str, ...]] = {
    "cs": (
        r"\b(class|interface|struct|enum|record|delegate)\s+{0}\b",
        r"\b(namespace)\s+[\w.]*\.?{0}\b",
    ),
    "ts": (
        r"\b(class|interface|type|enum)\s+{0}\b",
        r"\b(function)\s+{0}\b",
        r"\b(const|let|var)\s+{0}\b\s*[=:]",
    ),
    "py": (
        r"\b(class)\s+{0}\b",
        r"\b(def)\s+{0}\b",
        r"^{0}\s*=",
    ),
    "java": (
        r"\b(class|interface|enum|record|@interface)\s+{0}\b",
    ),
    "go": (
        r"\btype\s+{0}\s+",
        r"\bfunc\s+(?:\([^)]*\)\s+)?{0}\s*\(",
        r"\bvar\s+{0}\b",
        r"\bconst\s+{0}\b",
    ),
}


def build_definition_patterns(symbol: str, include: str = "") -> list[str]:
    """Instantiate the templates for ``symbol``.

    An include filter naming a known extension narrows the templates to that
    language; otherwise every language's templates are used.
    """
    escaped = re.escape(symbol)
    language = language_for_include(include)
    if language is not None:
        templates = DEFINITION_PATTERNS[language]
    else:
        templates = tuple(t for group in DEFINITION_PATTERNS.values() for t in group)
    # str.format would trip over regex braces, so substitute directly
    return [template.replace("{0}", escaped) for template in templates]


def _find_with_ripgrep(
    context: ToolContext, patterns: list[str], include: str, collector: MatchCollector
) -> None:
    args = [
        "-nH", "--no-messages", "--no-heading", "--color", "never", "-i",
        f"--field-match-separator={FIELD_SEPARATOR}",
    ]
    if include:
        args.extend(["--glob", include])
    args.extend(exclude_dir_globs(EXCLUDED_DIRS))
    args.extend(exclude_extension_globs(DOCUMENTATION_EXTENSIONS))
    args.extend(["-e", "|".join(patterns), str(context.files.root)])

    completed = run_ripgrep(args)
    if completed.returncode > EXIT_NO_MATCHES and not completed.stdout.strip():
        raise RipgrepError(completed.stderr.strip() or f"ripgrep exited with {completed.returncode}")

    for hit in parse_match_lines(completed.stdout):
        collector.add(hit.path, hit.line_number, truncate_text(hit.text.strip(), MAX_SIGNATURE_LENGTH))


def _find_in_process(
    context: ToolContext, patterns: list[str], include: str, collector: MatchCollector
) -> None:
    backend = context.files
    regexes: list[re.Pattern] = []
    for pattern in patterns:
        try:
            regexes.append(re.compile(pattern, re.IGNORECASE))
        except re.error:
            logger.debug("Skipping invalid definition pattern %r", pattern)

    include_spec = compile_glob(include) if include else None
    for path in backend.walk_files():
        if include_spec is not None:
            if not include_spec.match_file(backend.relative(path)):
                continue
        elif extension_of(path) not in LANGUAGE_BY_EXTENSION:
            continue

        try:
            lines = backend.read_lines(path)
        except OSError:
            continue

        for line_number, line in enumerate(lines, start=1):
            if any(regex.search(line) for regex in regexes):
                collector.add(path, line_number, truncate_text(line.strip(), MAX_SIGNATURE_LENGTH))


def find_definition(context: ToolContext, symbol: str, include: str = "") -> str:
    """Find where ``symbol`` is declared, newest files first."""
    include = include.strip()
    patterns = build_definition_patterns(symbol, include)
    collector = MatchCollector(context.files)

    searched = False
    if context.use_ripgrep and find_ripgrep():
        try:
            _find_with_ripgrep(context, patterns, include, collector)
            searched = True
        except RipgrepError as e:
            logger.warning("ripgrep definition search failed, using in-process regex: %s", e)
    if not searched:
        _find_in_process(context, patterns, include, collector)

    matches = collector.newest_first()
    if not matches:
        return f"No definitions found for '{symbol}'."

    truncated = len(matches) > RESULT_LIMIT
    matches = matches[:RESULT_LIMIT]

    output = [f"Found {len(matches)} definition(s) for '{symbol}':", ""]
    for match in matches:
        output.append(f"{match.relative_path}:{match.line_number}")
        output.append(f"  {match.line_text}")
        output.append("")
    if truncated:
        output.append("(Results truncated. Use the include filter to narrow the search.)")
    return "\n".join(output)


class FindDefinitionTool(Tool):
    name: str = "find_definition"
    description: str = (
        "Find where a symbol (class, interface, method, function, enum, type, etc.) is defined in the codebase. "
        "More precise than grep_search: returns only definition sites, not every usage. "
        "Supports C#, TypeScript/JavaScript, Python, Java, and Go. "
        'Optionally filter by file pattern (e.g. "*.cs").'
    )
    args_schema: type[ToolArgs] = FindDefinitionArgs

    def _explore(self, args: FindDefinitionArgs, context: ToolContext) -> str:
        return find_definition(context, args.symbol, args.include)
