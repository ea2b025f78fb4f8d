"""
Output handling: source discovery, output path templating and atomic writes.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, WriteStatus, validate_typescript
from .file_matcher import FileMatcher
from .path_resolver import PathResolver

__all__ = [
    "AtomicWriter",
    "FileMatcher",
    "PathResolver",
    "WriteStatus",
    "validate_typescript",
]
