"""
Source file discovery for glob patterns such as ``src/**/*.{js,jsx,ts,tsx}``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..utils.core.exceptions import NoSourceFilesError

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset({"node_modules", ".git", "dist", "build", ".next", "out", "coverage"})

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, innermost first: ``*.{ts,tsx}`` -> ``*.ts``, ``*.tsx``."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(pattern[: match.start()] + option + pattern[match.end() :]))
    return expanded


def _glob(pattern: str, root: Path) -> list[Path]:
    path = Path(pattern)
    if path.is_absolute():
        base = Path(path.anchor)
        relative = str(path.relative_to(base))
    else:
        base = root
        relative = pattern
    return [match for match in base.glob(relative) if match.is_file()]


def find_source_files(pattern: str, root: Path | None = None, required: bool = True) -> list[Path]:
    """
    Resolve a glob pattern to a sorted list of source files.

    Files under dependency and build directories (``node_modules``,
    ``dist``...) are skipped.

    Raises:
        NoSourceFilesError: If nothing matches and ``required`` is set
    """
    base = root if root is not None else Path.cwd()
    found: set[Path] = set()
    for expanded in expand_braces(pattern):
        for match in _glob(expanded, base):
            if EXCLUDED_DIRS.intersection(match.parts):
                continue
            found.add(match)

    if not found and required:
        raise NoSourceFilesError(pattern)

    logger.debug(f"Pattern {pattern} matched {len(found)} files")
    return sorted(found)
