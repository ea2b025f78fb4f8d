"""
Configuration for the schema generator.

The configuration lives in a JSON file (``schema-gen.config.json`` by default)
and is loaded into dataclasses after validation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .backends import available_backends
from .errors import ConfigNotFoundError, ConfigParseError, ConfigValidationError

CONFIG_FILE_NAME = "schema-gen.config.json"

# A variable is a fixed string or {"regex": "..."} whose first group is extracted from the source path
VariableValue = str | dict[str, str]


@dataclass
class MappingRule:
    """Maps source files matched by glob patterns to an output path pattern."""

    # Glob patterns of files to include; a leading "!" excludes
    include: list[str] = field(default_factory=list)

    # Output path pattern with {filename}, {dirname}, {extension} and custom variables
    output_pattern: str = ""

    # Custom variables for the output pattern
    variables: dict[str, VariableValue] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict) -> MappingRule:
        return MappingRule(
            include=list(d.get("include", [])),
            output_pattern=d.get("output", {}).get("pattern", ""),
            variables=dict(d.get("variables") or {}),
        )

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"include": self.include, "output": {"pattern": self.output_pattern}}
        if self.variables:
            result["variables"] = self.variables
        return result


@dataclass
class SchemaGenConfig:
    """Configuration options for schema generation."""

    mappings: list[MappingRule] = field(default_factory=list)

    # Name of the schema backend (see backends.available_backends())
    generator: str = "elysia"

    # Glob patterns excluded from every mapping
    exclude: list[str] = field(default_factory=list)

    # Whether to overwrite existing output files
    overwrite: bool = False

    @staticmethod
    def from_dict(d: dict) -> SchemaGenConfig:
        """Create a config from a dictionary."""
        return SchemaGenConfig(
            mappings=[MappingRule.from_dict(m) for m in d.get("mappings", [])],
            generator=d.get("generator", "elysia"),
            exclude=list(d.get("exclude") or []),
            overwrite=bool(d.get("overwrite", False)),
        )

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "mappings": [m.to_dict() for m in self.mappings],
            "generator": self.generator,
            "exclude": self.exclude,
            "overwrite": self.overwrite,
        }


def default_config() -> SchemaGenConfig:
    """The config written by ``ts_class_to_schema init``."""
    return SchemaGenConfig(
        mappings=[MappingRule(include=["src/**/*.ts"], output_pattern="schemas/{filename}.schema.ts")],
        generator="elysia",
        exclude=["**/*.test.ts", "**/*.spec.ts"],
    )


class ConfigLoader:
    """Loads and validates a JSON configuration file."""

    def __init__(self, config_path: str | Path | None = None):
        self.config_path = Path(config_path).resolve() if config_path else Path.cwd() / CONFIG_FILE_NAME

    def load(self) -> SchemaGenConfig:
        """
        Load the configuration.

        Raises:
            ConfigNotFoundError: If the file does not exist
            ConfigParseError: If the file is not valid JSON
            ConfigValidationError: If the content is not a valid configuration
        """
        if not self.config_path.is_file():
            raise ConfigNotFoundError(str(self.config_path))

        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigParseError(str(self.config_path), str(e)) from e

        self.validate(data)
        return SchemaGenConfig.from_dict(data)

    def validate(self, data: Any) -> None:
        if not isinstance(data, dict):
            raise ConfigValidationError("Config must be an object")

        self._validate_mappings(data.get("mappings"))
        self._validate_generator(data.get("generator"))
        if "exclude" in data:
            self._validate_exclude(data["exclude"])
        if "overwrite" in data and not isinstance(data["overwrite"], bool):
            raise ConfigValidationError('"overwrite" must be a boolean')

    def _validate_mappings(self, mappings: Any) -> None:
        if not isinstance(mappings, list):
            raise ConfigValidationError('Config must have "mappings" array')
        if not mappings:
            raise ConfigValidationError("At least one mapping rule is required")

        for i, mapping in enumerate(mappings):
            prefix = f"Mapping rule {i + 1}"
            if not isinstance(mapping, dict):
                raise ConfigValidationError(f"{prefix}: Must be an object")

            include = mapping.get("include")
            if not isinstance(include, list) or not include:
                raise ConfigValidationError(f'{prefix}: Must have "include" array with at least one pattern')
            if not all(_is_pattern(p) for p in include):
                raise ConfigValidationError(f'{prefix}: All "include" patterns must be non-empty strings')

            output = mapping.get("output")
            if not isinstance(output, dict):
                raise ConfigValidationError(f'{prefix}: Must have "output" object')
            if not _is_pattern(output.get("pattern")):
                raise ConfigValidationError(f'{prefix}: "output.pattern" must be a non-empty string')

            if "variables" in mapping:
                self._validate_variables(mapping["variables"], prefix)

    def _validate_variables(self, variables: Any, prefix: str) -> None:
        if not isinstance(variables, dict):
            raise ConfigValidationError(f'{prefix}: "variables" must be an object')

        for key, value in variables.items():
            if isinstance(value, str):
                continue
            if isinstance(value, dict) and isinstance(value.get("regex"), str):
                continue
            raise ConfigValidationError(f'{prefix}: Variable "{key}" must be a string or an object with a "regex" string field')

    def _validate_generator(self, generator: Any) -> None:
        if not generator:
            raise ConfigValidationError('Config must have "generator" field')
        if generator not in available_backends():
            raise ConfigValidationError(f'Unsupported generator: "{generator}". Must be one of: {", ".join(available_backends())}')

    def _validate_exclude(self, exclude: Any) -> None:
        if not isinstance(exclude, list):
            raise ConfigValidationError('Config must have "exclude" array')
        if not all(_is_pattern(p) for p in exclude):
            raise ConfigValidationError('All "exclude" patterns must be non-empty strings')


def _is_pattern(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""
