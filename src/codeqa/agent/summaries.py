"""Human-readable summaries of tool calls for progress events and audit records."""

import json
import os
import re
from pathlib import Path, PurePath
from typing import NamedTuple

ARGS_PREVIEW_LENGTH = 100
RECORD_PREVIEW_LENGTH = 500

_FOUND_RE = re.compile(r"^Found (\d+) ")
_GREP_LINE_RE = re.compile(r"^\s+Line \d+:")
_READ_LINE_RE = re.compile(r"^\s*(\d+)\| ")
_READ_HEADER_RE = re.compile(r"^File: .* \((\d+) total lines\)$")
_OUTLINE_LINE_RE = re.compile(r"^\s*\d+: ")
_DEFINITION_SITE_RE = re.compile(r"^(\S.*):(\d+)$")


class ResultSummary(NamedTuple):
    summary: str
    detail_items: list[str] | None = None
    detail_label: str | None = None


def _preview(text: str, limit: int = ARGS_PREVIEW_LENGTH) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _file_name(file_path: str) -> str:
    return PurePath(file_path).name if file_path else "(unknown)"


def format_tool_call_summary(tool_name: str, arguments_json: str) -> str:
    """One-line description of a tool call's arguments."""
    try:
        args = json.loads(arguments_json or "{}")
    except json.JSONDecodeError:
        return _preview(arguments_json or "")
    if not isinstance(args, dict):
        return _preview(arguments_json)

    if tool_name == "grep_search" and args.get("pattern"):
        summary = f"pattern={args['pattern']}"
        if args.get("include"):
            summary += f"  include={args['include']}"
        return summary
    if tool_name == "glob_search" and args.get("pattern"):
        return f"pattern={args['pattern']}"
    if tool_name == "find_definition" and args.get("symbol"):
        summary = f"symbol={args['symbol']}"
        if args.get("include"):
            summary += f"  include={args['include']}"
        return summary
    if tool_name in ("read_file", "get_file_outline", "get_related_files"):
        return _file_name(str(args.get("file_path") or ""))
    if tool_name == "list_directory":
        path = args.get("path")
        return _file_name(str(path)) if path else "(project root)"
    return _preview(arguments_json)


def truncate_for_record(result: str) -> str:
    """Result preview stored in the audit trail."""
    if len(result) > RECORD_PREVIEW_LENGTH:
        return result[:RECORD_PREVIEW_LENGTH] + f"... ({len(result)} chars total)"
    return result


def _found_count(result: str) -> int | None:
    match = _FOUND_RE.match(result)
    return int(match.group(1)) if match else None


def _summarize_grep(result: str) -> ResultSummary:
    counts: dict[str, int] = {}
    current = None
    for line in result.splitlines()[1:]:
        if _GREP_LINE_RE.match(line) and current is not None:
            counts[current] += 1
        elif line.endswith(":") and not line.startswith((" ", "(")):
            current = line[:-1]
            counts[current] = 0

    total = _found_count(result) or sum(counts.values())
    items = [f"{path} ({count} matches)" for path, count in counts.items()]
    return ResultSummary(f"{total} matches in {len(counts)} files", items, "Matched Files")


def _summarize_glob(result: str) -> ResultSummary:
    files = [line for line in result.splitlines()[1:] if line.strip() and not line.startswith("(")]
    return ResultSummary(f"{len(files)} files", files, "Found Files")


def _summarize_definitions(result: str) -> ResultSummary:
    sites = [line for line in result.splitlines()[1:] if _DEFINITION_SITE_RE.match(line)]
    return ResultSummary(f"{len(sites)} definition(s)", sites, "Definitions")


def _summarize_read(result: str) -> ResultSummary:
    lines = result.splitlines()
    header = _READ_HEADER_RE.match(lines[0]) if lines else None
    total = header.group(1) if header else "?"
    numbers = [int(m.group(1)) for m in map(_READ_LINE_RE.match, lines) if m]
    if not numbers:
        return ResultSummary(f"no lines shown ({total} total)")
    return ResultSummary(f"lines {numbers[0]}-{numbers[-1]} of {total}")


def _summarize_related(result: str) -> ResultSummary:
    counts = [0, 0]
    section = -1
    for line in result.splitlines():
        if line.startswith("── Dependencies"):
            section = 0
        elif line.startswith("── Dependents"):
            section = 1
        elif section >= 0 and line.startswith("  ") and not line.startswith("  ("):
            counts[section] += 1
    return ResultSummary(f"{counts[0]} dependencies, {counts[1]} dependents")


def summarize_tool_result(tool_name: str, result: str) -> ResultSummary:
    """Short result summary plus optional bullet items for the progress stream."""
    if result.startswith("Error"):
        return ResultSummary(result.splitlines()[0])

    if tool_name == "grep_search":
        if result.startswith("No matches"):
            return ResultSummary("no matches")
        return _summarize_grep(result)
    if tool_name == "glob_search":
        if result.startswith("No files"):
            return ResultSummary("no files")
        return _summarize_glob(result)
    if tool_name == "find_definition":
        if result.startswith("No definitions"):
            return ResultSummary("no definitions")
        return _summarize_definitions(result)
    if tool_name == "read_file":
        if result.startswith("[Binary file"):
            return ResultSummary("binary file")
        return _summarize_read(result)
    if tool_name == "get_file_outline":
        symbols = sum(1 for line in result.splitlines() if _OUTLINE_LINE_RE.match(line))
        return ResultSummary(f"{symbols} symbols")
    if tool_name == "get_related_files":
        return _summarize_related(result)
    if tool_name == "list_directory":
        entries = max(len([line for line in result.splitlines() if line.strip()]) - 1, 0)
        return ResultSummary(f"{entries} entries")
    return ResultSummary(f"{len(result)} chars")


def _normalize(root_path: str, file_path: str) -> str | None:
    file_path = file_path.strip()
    if not file_path:
        return None
    path = Path(file_path)
    if path.is_absolute():
        rel = os.path.relpath(path, root_path)
    else:
        rel = os.path.normpath(file_path)
    rel = PurePath(rel).as_posix()
    if rel.startswith("../") or rel == "..":
        return None
    return rel


def extract_relevant_files(tool_name: str, arguments_json: str, result: str, root_path: str) -> list[str]:
    """Root-relative paths a tool call touched, in order of appearance."""
    if result.startswith("Error"):
        return []

    candidates: list[str] = []
    if tool_name in ("read_file", "get_file_outline", "get_related_files"):
        try:
            args = json.loads(arguments_json or "{}")
        except json.JSONDecodeError:
            return []
        if isinstance(args, dict) and isinstance(args.get("file_path"), str):
            candidates.append(args["file_path"])
    elif tool_name == "grep_search":
        candidates.extend(
            line[:-1]
            for line in result.splitlines()[1:]
            if line.endswith(":") and not line.startswith((" ", "\t", "("))
        )
    elif tool_name == "glob_search":
        if _found_count(result) is not None:
            candidates.extend(
                line.strip()
                for line in result.splitlines()[1:]
                if line.strip() and not line.startswith("(")
            )
    elif tool_name == "find_definition":
        for line in result.splitlines()[1:]:
            match = _DEFINITION_SITE_RE.match(line)
            if match:
                candidates.append(match.group(1))

    files: list[str] = []
    for candidate in candidates:
        rel = _normalize(root_path, candidate)
        if rel and rel not in files:
            files.append(rel)
    return files
