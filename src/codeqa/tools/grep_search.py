"""Regex content search, grouped per file, newest files first."""

import logging
import re

from .base import Tool, ToolContext
from .globbing import compile_glob
from .languages import (
    BINARY_EXTENSIONS,
    DOCUMENTATION_EXTENSIONS,
    EXCLUDED_DIRS,
    SEARCHABLE_EXTENSIONS,
    extension_of,
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
from .schemas import GrepArgs, ToolArgs
from .search import MatchCollector, group_by_file, truncate_text

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 2000
RESULT_LIMIT = 100


def compile_search_regex(pattern: str) -> re.Pattern:
    """Compile case-insensitively; an invalid regex is searched as a literal."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        logger.debug("Invalid regex %r, searching as literal text", pattern)
        return re.compile(re.escape(pattern), re.IGNORECASE)


def _grep_with_ripgrep(
    context: ToolContext, pattern: str, include: str, collector: MatchCollector
) -> None:
    args = [
        "-nH", "--hidden", "--no-messages", "--no-ignore", "--no-heading",
        "--color", "never", f"--field-match-separator={FIELD_SEPARATOR}", "-i",
    ]
    # Later globs win in ripgrep, so exclusions go after the include filter
    if include:
        args.extend(["--glob", include])
    args.extend(exclude_dir_globs(EXCLUDED_DIRS))
    args.extend(exclude_extension_globs(DOCUMENTATION_EXTENSIONS))
    args.extend(["--regexp", pattern, str(context.files.root)])

    completed = run_ripgrep(args)
    if completed.returncode > EXIT_NO_MATCHES and not completed.stdout.strip():
        # Also covers patterns ripgrep's regex engine rejects
        raise RipgrepError(completed.stderr.strip() or f"ripgrep exited with {completed.returncode}")

    for hit in parse_match_lines(completed.stdout):
        collector.add(hit.path, hit.line_number, truncate_text(hit.text.strip(), MAX_LINE_LENGTH))


def _grep_in_process(
    context: ToolContext, pattern: str, include: str, collector: MatchCollector
) -> None:
    backend = context.files
    regex = compile_search_regex(pattern)
    include_spec = compile_glob(include) if include else None

    for path in backend.walk_files():
        ext = extension_of(path)
        if ext in DOCUMENTATION_EXTENSIONS or ext in BINARY_EXTENSIONS:
            continue
        if include_spec is not None:
            if not include_spec.match_file(backend.relative(path)):
                continue
        elif ext not in SEARCHABLE_EXTENSIONS:
            continue

        try:
            lines = backend.read_lines(path)
        except OSError:
            continue

        for line_number, line in enumerate(lines, start=1):
            if regex.search(line):
                collector.add(path, line_number, truncate_text(line.strip(), MAX_LINE_LENGTH))


def grep_search(context: ToolContext, pattern: str, include: str = "") -> str:
    """Search file contents for ``pattern`` (case-insensitive)."""
    include = include.strip()
    collector = MatchCollector(context.files)

    searched = False
    if context.use_ripgrep and find_ripgrep():
        try:
            _grep_with_ripgrep(context, pattern, include, collector)
            searched = True
        except RipgrepError as e:
            logger.warning("ripgrep search failed, using in-process regex: %s", e)
    if not searched:
        _grep_in_process(context, pattern, include, collector)

    matches = collector.newest_first()
    if not matches:
        return "No matches found."

    truncated = len(matches) > RESULT_LIMIT
    matches = matches[:RESULT_LIMIT]

    output = [f"Found {len(matches)} matches:"]
    for index, (rel_path, file_matches) in enumerate(group_by_file(matches).items()):
        if index:
            output.append("")
        output.append(f"{rel_path}:")
        output.extend(f"  Line {m.line_number}: {m.line_text}" for m in file_matches)

    if truncated:
        output.append("")
        output.append("(Results truncated. Consider a more specific pattern or include filter.)")
    return "\n".join(output)


class GrepTool(Tool):
    name: str = "grep_search"
    description: str = (
        "Search file contents using regular expressions. "
        "Returns matching lines with file paths and line numbers, sorted by file modification time (newest first). "
        'Supports full regex syntax (e.g. "log.*Error", "class\\s+Order"). '
        'Use the \'include\' parameter to filter by file type (e.g. "*.cs", "*.{ts,tsx}"). '
        "Use this tool when you need to find code containing specific patterns, class names, "
        "function names, or keywords."
    )
    args_schema: type[ToolArgs] = GrepArgs

    def _explore(self, args: GrepArgs, context: ToolContext) -> str:
        return grep_search(context, args.pattern, args.include)
