"""
Source file scanning for the code-migration handlers.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

SOURCE_DIR = "src"
IGNORED_DIRS = frozenset({"node_modules", "dist", ".angular", ".git"})


@dataclass(frozen=True)
class LineMatch:
    path: Path
    line: int  # 1-based
    text: str


def source_files(project_root: str, suffixes: tuple[str, ...]) -> Iterator[Path]:
    """Files under <project_root>/src with one of the suffixes, sorted."""
    base = Path(project_root) / SOURCE_DIR
    if not base.is_dir():
        return
    for path in sorted(base.rglob("*")):
        if not path.is_file() or path.suffix not in suffixes:
            continue
        if IGNORED_DIRS.intersection(path.relative_to(base).parts):
            continue
        yield path


def search_files(
    project_root: str, pattern: re.Pattern[str], suffixes: tuple[str, ...]
) -> list[LineMatch]:
    """Every source line matching pattern."""
    matches: list[LineMatch] = []
    for path in source_files(project_root, suffixes):
        text = path.read_text(encoding="utf-8", errors="replace")
        for number, line in enumerate(text.splitlines(), start=1):
            if pattern.search(line):
                matches.append(LineMatch(path, number, line.strip()))
    return matches
