"""Find files by glob pattern, newest first."""

import logging

from .base import Tool, ToolContext
from .globbing import compile_glob, load_gitignore
from .ripgrep import EXIT_NO_MATCHES, RipgrepError, exclude_dir_globs, find_ripgrep, run_ripgrep
from .schemas import GlobArgs, ToolArgs
from .search import MatchCollector

logger = logging.getLogger(__name__)

RESULT_LIMIT = 100
VCS_DIRS = (".git", ".svn", ".hg")


def _glob_with_ripgrep(context: ToolContext, pattern: str, collector: MatchCollector) -> None:
    args = ["--files", "--hidden", "--follow", *exclude_dir_globs(VCS_DIRS), "--glob", pattern, str(context.files.root)]
    completed = run_ripgrep(args)
    if completed.returncode > EXIT_NO_MATCHES and not completed.stdout.strip():
        raise RipgrepError(completed.stderr.strip() or f"ripgrep exited with {completed.returncode}")

    for line in completed.stdout.splitlines():
        if line.strip():
            collector.add(line.strip())


def _glob_in_process(context: ToolContext, pattern: str, collector: MatchCollector) -> None:
    backend = context.files
    spec = compile_glob(pattern)
    gitignore = load_gitignore(backend.root)

    for path in backend.walk_files():
        rel_path = backend.relative(path)
        if gitignore is not None and gitignore.match_file(rel_path):
            continue
        if spec.match_file(rel_path):
            collector.add(path)


def glob_search(context: ToolContext, pattern: str) -> str:
    """Find files matching ``pattern``, sorted by modification time (newest first)."""
    collector = MatchCollector(context.files)

    searched = False
    if context.use_ripgrep and find_ripgrep():
        try:
            _glob_with_ripgrep(context, pattern, collector)
            searched = True
        except RipgrepError as e:
            logger.warning("ripgrep glob failed, using in-process matcher: %s", e)
    if not searched:
        _glob_in_process(context, pattern, collector)

    files = collector.newest_first()
    if not files:
        return "No files found."

    truncated = len(files) > RESULT_LIMIT
    files = files[:RESULT_LIMIT]

    output = [f"Found {len(files)} files:"]
    output.extend(match.relative_path for match in files)
    if truncated:
        output.append("")
        output.append("(Results truncated. Consider a more specific pattern.)")
    return "\n".join(output)


class GlobTool(Tool):
    name: str = "glob_search"
    description: str = (
        "Find files by name pattern using glob syntax. "
        "Returns a list of matching file paths sorted by modification time (newest first). "
        'Examples: "**/*.cs" (all C# files), "Controllers/*.cs" (controllers), '
        '"**/Order*.cs" (files starting with Order). '
        "Use this tool to find specific files by name before reading them. "
        "This is faster than grep_search when you know the file name pattern."
    )
    args_schema: type[ToolArgs] = GlobArgs

    def _explore(self, args: GlobArgs, context: ToolContext) -> str:
        return glob_search(context, args.pattern)
