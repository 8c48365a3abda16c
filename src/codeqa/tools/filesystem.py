"""Local filesystem access for the exploration tools."""

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from .languages import EXCLUDED_DIRS


class PathOutsideRootError(ValueError):
    """Raised when a requested path resolves outside the project root."""


class LocalFileBackend:
    """Read-only filesystem view bound to one project root.

    Paths handed in by the model may be relative (to the root) or absolute.
    Anything that resolves outside the root is rejected.
    """

    def __init__(self, root_path: str | Path, excluded_dirs: Iterable[str] | None = None):
        """Initialize backend bound to a project root.

        Args:
            root_path: Directory every tool call is scoped to
            excluded_dirs: Directory names pruned from walks (defaults to VCS/build folders)
        """
        self._root = Path(root_path).resolve()
        self._excluded = {d.lower() for d in (excluded_dirs or EXCLUDED_DIRS)}

    @property
    def root(self) -> Path:
        return self._root

    def is_excluded_dir(self, name: str) -> bool:
        return name.lower() in self._excluded

    def resolve(self, path: str | None) -> Path:
        """Resolve a user-supplied path against the root.

        Raises:
            PathOutsideRootError: If the resolved path escapes the root
        """
        if not path or path.strip() in ("", "."):
            return self._root

        candidate = Path(path.strip())
        if not candidate.is_absolute():
            candidate = self._root / candidate
        full_path = candidate.resolve()

        try:
            full_path.relative_to(self._root)
        except ValueError:
            raise PathOutsideRootError(f"Path is outside the project root: {path}") from None
        return full_path

    def relative(self, path: str | Path) -> str:
        """Root-relative path using forward slashes."""
        full_path = Path(path)
        try:
            return full_path.relative_to(self._root).as_posix()
        except ValueError:
            return Path(os.path.relpath(full_path, self._root)).as_posix()

    def walk_files(
        self,
        start: Path | None = None,
        extensions: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        """Iterate over files below ``start``, pruning excluded directories.

        Args:
            start: Directory to walk (defaults to the root)
            extensions: Lower-cased suffixes to keep; all files when omitted

        Yields:
            Absolute file paths
        """
        allowed = set(extensions) if extensions is not None else None
        for dirpath, dirnames, filenames in os.walk(start or self._root):
            dirnames[:] = sorted(d for d in dirnames if not self.is_excluded_dir(d))
            for filename in sorted(filenames):
                if allowed is not None and Path(filename).suffix.lower() not in allowed:
                    continue
                yield Path(dirpath) / filename

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8", errors="replace")

    def read_lines(self, path: Path) -> list[str]:
        return self.read_text(path).splitlines()

    def modified_time(self, path: Path) -> datetime:
        try:
            return datetime.fromtimestamp(path.stat().st_mtime)
        except (OSError, OverflowError, ValueError):
            return datetime.min
