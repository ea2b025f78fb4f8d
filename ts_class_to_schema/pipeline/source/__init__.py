"""
TypeScript source reading.

Tree-sitter based implementation of the type handle interfaces.
"""

from __future__ import annotations

from .type_handles import ConstantHandle, KeywordHandle, Member, SyntaxTypeHandle
from .typescript_source import (
    SyntaxClassDeclaration,
    SyntaxPropertyDeclaration,
    TypeScriptProject,
    TypeScriptSource,
)

__all__ = [
    "ConstantHandle",
    "KeywordHandle",
    "Member",
    "SyntaxClassDeclaration",
    "SyntaxPropertyDeclaration",
    "SyntaxTypeHandle",
    "TypeScriptProject",
    "TypeScriptSource",
]
