"""
Error taxonomy for schema generation.

Every error is a deterministic function of its input; none of them is retried.
The orchestrator catches SchemaGenError per class so one bad declaration never
aborts unrelated classes.
"""

from __future__ import annotations


class SchemaGenError(Exception):
    """Base class for all schema generation errors."""


class UnsupportedTypeError(SchemaGenError):
    """Raised when a type matches none of the resolver's known shapes.

    Attributes:
        type_text: Textual form of the offending type, verbatim
    """

    def __init__(self, type_text: str, reason: str = ""):
        self.type_text = type_text
        self.reason = reason
        message = f"Unsupported type: {type_text}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class CircularTypeError(UnsupportedTypeError):
    """Raised when a declaration structurally refers back to itself."""

    def __init__(self, type_text: str, chain: list[str]):
        self.chain = chain
        super().__init__(type_text, "circular reference: " + " -> ".join(chain))


class MissingBackendCapabilityError(SchemaGenError):
    """Raised when a backend has no construct for an IR variant."""

    def __init__(self, backend: str, variant: str):
        self.backend = backend
        self.variant = variant
        super().__init__(f"Backend '{backend}' cannot render '{variant}' types")


class AnonymousDeclarationError(SchemaGenError):
    """Raised when a class has no retrievable name."""

    def __init__(self, source_location: str):
        self.source_location = source_location
        super().__init__(f"Found anonymous class at '{source_location}'")


class UnknownBackendError(SchemaGenError):
    def __init__(self, name: str, available: list[str]):
        self.name = name
        super().__init__(f"Unsupported generator: '{name}'. Must be one of: {', '.join(available)}")


class SourceParseError(SchemaGenError):
    """Raised when a TypeScript source file contains syntax errors."""

    def __init__(self, path: str, line: int, near: str):
        self.path = path
        self.line = line
        super().__init__(f"Failed to parse '{path}' at line {line}: syntax error near '{near}'")


class OutputValidationError(SchemaGenError):
    """Raised when generated schema code does not parse as TypeScript."""


class ConfigNotFoundError(SchemaGenError):
    def __init__(self, config_path: str):
        self.config_path = config_path
        super().__init__(
            f"Config file not found at: {config_path}\n\n"
            "Please create a config file by:\n"
            "1. Run: ts_class_to_schema init\n"
            "2. Or manually create: schema-gen.config.json"
        )


class ConfigParseError(SchemaGenError):
    def __init__(self, config_path: str, parse_error: str):
        self.config_path = config_path
        super().__init__(f"Invalid JSON in config file: {config_path}\n{parse_error}")


class ConfigValidationError(SchemaGenError):
    pass
