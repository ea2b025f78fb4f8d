"""
Output path templating.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from ..config import VariableValue


class PathResolver:
    """Expands an output pattern for a given source path.

    Custom variables are substituted first, so a custom variable named like a
    built-in one ({filename}, {dirname}, {extension}) takes precedence.
    """

    def resolve(self, source_path: str, pattern: str, variables: Mapping[str, VariableValue] | None = None) -> str:
        """
        Resolve the output path of a source file.

        Args:
            source_path: Path of the source file
            pattern: Output pattern, e.g. ``{dirname}/schemas/{filename}.schema.ts``
            variables: Custom variables, fixed strings or ``{"regex": ...}`` extractions

        Returns:
            The output path
        """
        result = pattern
        for name, value in (variables or {}).items():
            result = result.replace(f"{{{name}}}", self._variable_value(source_path, value))

        stem, extension = os.path.splitext(os.path.basename(source_path))
        dirname = os.path.dirname(source_path) or "."
        return result.replace("{filename}", stem).replace("{dirname}", dirname).replace("{extension}", extension)

    def _variable_value(self, source_path: str, value: VariableValue) -> str:
        if isinstance(value, str):
            return value
        # First capture group, or the whole match when the regex has no group
        match = re.search(value["regex"], source_path)
        if match is None:
            return ""
        return match.group(1) if match.groups() else match.group(0)
