"""Thin adapter around the ripgrep executable."""

import logging
import shutil
import subprocess
from typing import Iterable, Iterator, NamedTuple

logger = logging.getLogger(__name__)

RIPGREP_TIMEOUT_SECONDS = 30
FIELD_SEPARATOR = "|"

# Exit codes: 0 matches, 1 no matches, 2 error (possibly with partial output)
EXIT_NO_MATCHES = 1


class RipgrepError(RuntimeError):
    """Raised when ripgrep cannot be started or does not finish in time."""


class RipgrepLine(NamedTuple):
    path: str
    line_number: int
    text: str


def find_ripgrep() -> str | None:
    """Locate ``rg`` on PATH."""
    return shutil.which("rg")


def run_ripgrep(
    args: list[str],
    timeout: float = RIPGREP_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess:
    """Run ripgrep with the given arguments and capture its output.

    Raises:
        RipgrepError: If the binary is missing, fails to start, or times out
    """
    executable = find_ripgrep()
    if executable is None:
        raise RipgrepError("ripgrep (rg) was not found on PATH")

    logger.debug("Running ripgrep: %s", args)
    try:
        return subprocess.run(
            [executable, *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise RipgrepError(f"ripgrep timed out after {timeout}s") from e
    except OSError as e:
        raise RipgrepError(f"failed to start ripgrep: {e}") from e


def exclude_dir_globs(dirs: Iterable[str]) -> list[str]:
    """Build ``--glob !**/<dir>/**`` argument pairs."""
    args: list[str] = []
    for name in sorted(dirs):
        args.extend(["--glob", f"!**/{name}/**"])
    return args


def exclude_extension_globs(extensions: Iterable[str]) -> list[str]:
    args: list[str] = []
    for ext in sorted(extensions):
        args.extend(["--glob", f"!*{ext}"])
    return args


def parse_match_lines(stdout: str) -> Iterator[RipgrepLine]:
    """Parse ``path|line|text`` records produced with ``--field-match-separator=|``."""
    for raw in stdout.splitlines():
        first = raw.find(FIELD_SEPARATOR)
        if first <= 0:
            continue
        second = raw.find(FIELD_SEPARATOR, first + 1)
        if second <= first:
            continue
        try:
            line_number = int(raw[first + 1:second])
        except ValueError:
            continue
        yield RipgrepLine(raw[:first], line_number, raw[second + 1:])
