"""Paginated file reading with line numbers."""

from .base import Tool, ToolContext
from .languages import BINARY_EXTENSIONS, extension_of
from .schemas import ReadFileArgs, ToolArgs
from .search import truncate_text

DEFAULT_MAX_LINES = 500
MAX_LINE_LENGTH = 2000
MAX_OUTPUT_BYTES = 50 * 1024


def read_file(
    context: ToolContext,
    file_path: str,
    offset: int = 0,
    max_lines: int = DEFAULT_MAX_LINES,
) -> str:
    """Read ``max_lines`` lines starting at the 0-based ``offset``.

    The output always ends with exactly one annotation: byte-budget truncation,
    more lines remaining, or end of file. Both continuation annotations name
    the offset of the first line not shown.
    """
    backend = context.files
    path = backend.resolve(file_path)
    if not path.is_file():
        return f"Error: File not found: {file_path}"

    if extension_of(path) in BINARY_EXTENSIONS:
        return f"[Binary file: {file_path}]"

    lines = backend.read_lines(path)
    total = len(lines)
    end = min(total, offset + max_lines)

    output = [f"File: {backend.relative(path)} ({total} total lines)", ""]
    used_bytes = 0
    index = offset
    while index < end:
        rendered = f"{index + 1:>5}| {truncate_text(lines[index], MAX_LINE_LENGTH)}"
        size = len(rendered.encode("utf-8")) + 1
        if used_bytes + size > MAX_OUTPUT_BYTES:
            output.append("")
            output.append(f"(Output truncated at 50KB. Use offset={index} to continue reading.)")
            return "\n".join(output)
        output.append(rendered)
        used_bytes += size
        index += 1

    output.append("")
    if end < total:
        output.append(f"(File has {total - end} more lines. Use offset={end} to continue reading.)")
    else:
        output.append(f"(End of file — {total} total lines)")
    return "\n".join(output)


class ReadFileTool(Tool):
    name: str = "read_file"
    description: str = (
        "Read the contents of a file. Returns file content with line numbers. "
        "Use the 'offset' parameter to start reading from a specific line (0-based). "
        "Use the 'max_lines' parameter to limit how many lines to read (default: 500). "
        "Use this tool after grep_search to read the full context of matching files. "
        "File path can be absolute or relative to the project root."
    )
    args_schema: type[ToolArgs] = ReadFileArgs

    def _explore(self, args: ReadFileArgs, context: ToolContext) -> str:
        return read_file(context, args.file_path, args.offset, args.max_lines)
