"""Helpers shared by the searching tools (glob, grep, find_definition)."""

from datetime import datetime
from pathlib import Path

from ..models import SearchMatch
from .filesystem import LocalFileBackend


def truncate_text(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class MatchCollector:
    """Accumulates search hits, looking up each file's mtime once."""

    def __init__(self, backend: LocalFileBackend):
        self._backend = backend
        self._mtimes: dict[Path, datetime] = {}
        self._seen: set[tuple[Path, int]] = set()
        self.matches: list[SearchMatch] = []

    def add(self, path: str | Path, line_number: int = 0, line_text: str = "") -> None:
        full_path = Path(path)
        if not full_path.is_absolute():
            full_path = self._backend.root / full_path
        key = (full_path, line_number)
        if key in self._seen:
            return
        self._seen.add(key)

        if full_path not in self._mtimes:
            self._mtimes[full_path] = self._backend.modified_time(full_path)

        self.matches.append(
            SearchMatch(
                absolute_path=str(full_path),
                relative_path=self._backend.relative(full_path),
                line_number=line_number,
                line_text=line_text,
                modified=self._mtimes[full_path],
            )
        )

    def newest_first(self) -> list[SearchMatch]:
        """Matches ordered by file mtime descending, then path and line."""
        ordered = sorted(self.matches, key=lambda m: (m.relative_path, m.line_number))
        return sorted(ordered, key=lambda m: m.modified, reverse=True)


def group_by_file(matches: list[SearchMatch]) -> dict[str, list[SearchMatch]]:
    """Group matches per relative path, preserving first-seen order."""
    grouped: dict[str, list[SearchMatch]] = {}
    for match in matches:
        grouped.setdefault(match.relative_path, []).append(match)
    return grouped
