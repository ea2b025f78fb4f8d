"""
Pipeline - TypeScript class to validation schema generator.

1. Source (tree-sitter): Parse TypeScript files into declaration handles
2. Analyzer: Resolve declared property types into the type IR
3. Backend: Render the IR as Elysia, TypeBox or Zod schema code
4. Output: Match source files, template output paths and write atomically
"""

from __future__ import annotations

from .backends import SchemaBackend, available_backends, get_backend
from .config import CONFIG_FILE_NAME, ConfigLoader, MappingRule, SchemaGenConfig, default_config
from .errors import SchemaGenError
from .generator import ConvertedSource, GenerateResult, GenerationFailure, SchemaGen, SchemaGenerationResult
from .output import AtomicWriter, WriteStatus

__all__ = [
    "AtomicWriter",
    "CONFIG_FILE_NAME",
    "ConfigLoader",
    "ConvertedSource",
    "GenerateResult",
    "GenerationFailure",
    "MappingRule",
    "SchemaBackend",
    "SchemaGen",
    "SchemaGenConfig",
    "SchemaGenError",
    "SchemaGenerationResult",
    "WriteStatus",
    "available_backends",
    "default_config",
    "get_backend",
]
