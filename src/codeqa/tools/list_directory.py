"""Depth-bounded directory tree listing."""

from pathlib import Path

from .base import Tool, ToolContext
from .filesystem import LocalFileBackend
from .languages import SOURCE_AND_CONFIG_EXTENSIONS
from .schemas import ListDirectoryArgs, ToolArgs

MAX_FILES_PER_DIR = 30


def build_tree(
    backend: LocalFileBackend,
    directory: Path,
    max_depth: int,
    lines: list[str],
    indent: str = "",
    depth: int = 0,
) -> None:
    """Append an indented tree of ``directory`` to ``lines``.

    Excluded subdirectories and anything past ``max_depth`` are pruned before
    recursing; the starting directory is listed whatever its name. Only
    source/config files are listed, capped per directory.
    """
    if depth >= max_depth:
        return

    try:
        entries = list(directory.iterdir())
        subdirs = sorted(
            (e for e in entries if e.is_dir() and not backend.is_excluded_dir(e.name)),
            key=lambda p: p.name,
        )
        files = sorted(
            (e for e in entries if e.is_file() and e.suffix.lower() in SOURCE_AND_CONFIG_EXTENSIONS),
            key=lambda p: p.name,
        )
    except PermissionError:
        lines.append(f"{indent}  [Access Denied]")
        return

    for subdir in subdirs:
        lines.append(f"{indent}{subdir.name}/")
        build_tree(backend, subdir, max_depth, lines, indent + "  ", depth + 1)

    for file in files[:MAX_FILES_PER_DIR]:
        lines.append(f"{indent}  {file.name}")

    if len(files) > MAX_FILES_PER_DIR:
        lines.append(f"{indent}  ... and {len(files) - MAX_FILES_PER_DIR} more files")


def list_directory(context: ToolContext, path: str = "", max_depth: int = 3) -> str:
    """List a directory as an indented tree."""
    backend = context.files
    directory = backend.resolve(path)
    if not directory.is_dir():
        return f"Error: Directory not found: {path or context.root_path}"

    rel_root = backend.relative(directory)
    header = backend.root.name if rel_root == "." else rel_root

    lines = [f"Directory: {header}", ""]
    build_tree(backend, directory, max_depth, lines)
    return "\n".join(lines) + "\n"


class ListDirectoryTool(Tool):
    name: str = "list_directory"
    description: str = (
        "List the contents of a directory as a tree structure. "
        "Shows subdirectories and code files. Use 'max_depth' to control traversal depth (default: 3). "
        "Path can be absolute or relative to the project root. "
        "Use this tool first to understand the project structure before searching for specific code."
    )
    args_schema: type[ToolArgs] = ListDirectoryArgs

    def _explore(self, args: ListDirectoryArgs, context: ToolContext) -> str:
        return list_directory(context, args.path, args.max_depth)
