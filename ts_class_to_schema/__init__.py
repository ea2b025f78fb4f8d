"""TypeScript Class to Schema Generator

A Python package for generating runtime validation schemas (Elysia, TypeBox,
Zod) from the property declarations of TypeScript classes.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    ConfigLoader,
    GenerateResult,
    SchemaGen,
    SchemaGenConfig,
    SchemaGenError,
    get_backend,
)

__all__ = [
    "SchemaGen",
    "SchemaGenConfig",
    "ConfigLoader",
    "GenerateResult",
    "SchemaGenError",
    "AtomicWriter",
    "get_backend",
]
