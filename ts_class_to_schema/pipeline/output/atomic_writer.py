"""
Atomic file writer for generated schema modules.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from enum import Enum
from pathlib import Path

import structlog
from tree_sitter import Parser

from ..errors import OutputValidationError
from ..source.typescript_source import TYPESCRIPT

log = structlog.get_logger("ts_class_to_schema.writer")


class WriteStatus(str, Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"  # Existing file kept because overwrite is disabled


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(self, overwrite: bool = False, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            overwrite: Whether existing files are replaced
            validate: Validation function for generated code, TypeScript syntax check by default
        """
        self.overwrite = overwrite
        self._validate = validate or validate_typescript

    def write(self, path: Path, content: str) -> WriteStatus:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write

        Returns:
            Whether the file was created, overwritten, or left untouched

        Raises:
            OutputValidationError: If the content is not valid TypeScript
            OSError: If file operations fail
        """
        existed = path.exists()
        if existed and not self.overwrite:
            log.warning("schema_skipped", path=str(path), reason="file exists and overwrite is disabled")
            return WriteStatus.SKIPPED

        self._validate(content)

        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        status = WriteStatus.OVERWRITTEN if existed else WriteStatus.CREATED
        log.info("schema_written", path=str(path), status=status.value)
        return status


def validate_typescript(content: str) -> None:
    """Check that generated code parses as TypeScript.

    Raises:
        OutputValidationError: On the first syntax error
    """
    tree = Parser(TYPESCRIPT).parse(content.encode("utf8"))
    if not tree.root_node.has_error:
        return

    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            raise OutputValidationError(f"Generated code is not valid TypeScript at line {node.start_point[0] + 1}")
        stack.extend(reversed(node.children))
    raise OutputValidationError("Generated code is not valid TypeScript")
