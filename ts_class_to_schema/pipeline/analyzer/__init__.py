"""
Analyzer module.

Contains the IR, the type handle interface, the type resolver and the class
extractor.
"""

from __future__ import annotations

from .extractor import ClassExtractor, narrow_optional
from .handles import ClassDeclarationHandle, IndexSignature, MemberHandle, PropertyDeclarationHandle, TypeHandle
from .ir_nodes import (
    ArrayType,
    IntersectionType,
    LiteralType,
    NeverType,
    ObjectType,
    ParsedClass,
    PrimitiveKind,
    PrimitiveType,
    Property,
    PropertyType,
    RecordType,
    TemplateLiteralType,
    TypeKind,
    UnionType,
)
from .resolver import TypeResolver

__all__ = [
    "ArrayType",
    "ClassDeclarationHandle",
    "ClassExtractor",
    "IndexSignature",
    "IntersectionType",
    "LiteralType",
    "MemberHandle",
    "NeverType",
    "ObjectType",
    "ParsedClass",
    "PrimitiveKind",
    "PrimitiveType",
    "Property",
    "PropertyDeclarationHandle",
    "PropertyType",
    "RecordType",
    "TemplateLiteralType",
    "TypeHandle",
    "TypeKind",
    "TypeResolver",
    "UnionType",
    "narrow_optional",
]
