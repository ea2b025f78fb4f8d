"""
Glob-based source file discovery.
"""

from __future__ import annotations

import glob
import os
from collections.abc import Iterable


class FileMatcher:
    """Finds the files matched by include patterns and not by exclude patterns.

    Include patterns starting with ``!`` act as excludes. Results are
    de-duplicated and sorted.
    """

    def __init__(self, include: list[str], exclude: list[str] | None = None, root_dir: str | None = None):
        self.include = include
        self.exclude = exclude or []
        self.root_dir = root_dir

    def find(self) -> list[str]:
        positive = [p for p in self.include if not p.startswith("!")]
        negative = [p[1:] for p in self.include if p.startswith("!")] + self.exclude

        files = set(self._scan_all(positive))
        files -= set(self._scan_all(negative))
        return sorted(files)

    def _scan_all(self, patterns: Iterable[str]) -> list[str]:
        return [path for pattern in patterns for path in self._scan(pattern)]

    def _scan(self, pattern: str) -> list[str]:
        matches = glob.glob(pattern, root_dir=self.root_dir, recursive=True, include_hidden=True)
        base = self.root_dir or "."
        return [m for m in matches if os.path.isfile(os.path.join(base, m))]
