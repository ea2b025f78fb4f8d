"""
IR (Intermediate Representation) node definitions.

These nodes represent a resolved property type, ready for code generation.
The set of variants is closed: every consumer matches on TypeKind and treats
an unknown kind as a programming error. Nodes are frozen and hold tuples, so
an IR tree is never mutated after the resolver builds it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class TypeKind(Enum):
    """Kind of type in the IR."""

    PRIMITIVE = "primitive"  # string, number, boolean, date, null, undefined, any
    ARRAY = "array"  # T[]
    OBJECT = "object"  # { a: T; b?: U }
    UNION = "union"  # T | U | ...
    INTERSECTION = "intersection"  # T & U & ...
    LITERAL = "literal"  # 'a', 1, true
    RECORD = "record"  # Record<K, V>
    TEMPLATE_LITERAL = "templateLiteral"  # `id-${number}`
    NEVER = "never"


class PrimitiveKind(Enum):
    """Primitive type names."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"
    UNDEFINED = "undefined"
    ANY = "any"


LiteralValue = str | int | float | bool


@dataclass(frozen=True)
class PrimitiveType:
    name: PrimitiveKind

    kind: ClassVar[TypeKind] = TypeKind.PRIMITIVE


@dataclass(frozen=True)
class ArrayType:
    element_type: PropertyType

    kind: ClassVar[TypeKind] = TypeKind.ARRAY


@dataclass(frozen=True)
class ObjectType:
    """A structural object shape, properties in declaration order."""

    properties: tuple[Property, ...] = ()

    kind: ClassVar[TypeKind] = TypeKind.OBJECT

    def __post_init__(self):
        _check_unique_names(self.properties, "object type")


@dataclass(frozen=True)
class UnionType:
    members: tuple[PropertyType, ...]

    kind: ClassVar[TypeKind] = TypeKind.UNION

    def __post_init__(self):
        if not self.members:
            raise ValueError("Union type must have at least one member")


@dataclass(frozen=True)
class IntersectionType:
    members: tuple[PropertyType, ...]

    kind: ClassVar[TypeKind] = TypeKind.INTERSECTION

    def __post_init__(self):
        # An empty intersection must fail here rather than render as never
        if not self.members:
            raise ValueError("Intersection type must have at least one member")


@dataclass(frozen=True)
class LiteralType:
    value: LiteralValue

    kind: ClassVar[TypeKind] = TypeKind.LITERAL


@dataclass(frozen=True)
class RecordType:
    key_type: PropertyType
    value_type: PropertyType

    kind: ClassVar[TypeKind] = TypeKind.RECORD

    def __post_init__(self):
        if self.key_type not in (STRING, NUMBER):
            raise ValueError(f"Record key must be a string or number primitive, got {self.key_type}")


@dataclass(frozen=True)
class TemplateLiteralType:
    """Literal fragments (LiteralType of str) alternating with interpolated types."""

    elements: tuple[PropertyType, ...]

    kind: ClassVar[TypeKind] = TypeKind.TEMPLATE_LITERAL


@dataclass(frozen=True)
class NeverType:
    kind: ClassVar[TypeKind] = TypeKind.NEVER


PropertyType = (
    PrimitiveType
    | ArrayType
    | ObjectType
    | UnionType
    | IntersectionType
    | LiteralType
    | RecordType
    | TemplateLiteralType
    | NeverType
)


@dataclass(frozen=True)
class Property:
    """A property of a class or of an inline object type."""

    name: str
    type: PropertyType
    is_optional: bool = False
    is_readonly: bool = False
    has_default_value: bool = False

    def __post_init__(self):
        if not self.name:
            raise ValueError("Property name must not be empty")


@dataclass(frozen=True)
class ParsedClass:
    """Complete information extracted from one class declaration."""

    name: str
    source_location: str = ""
    is_exported: bool = True
    properties: tuple[Property, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Class name must not be empty")
        _check_unique_names(self.properties, f"class {self.name}")


def _check_unique_names(properties: tuple[Property, ...], owner: str) -> None:
    seen: set[str] = set()
    for prop in properties:
        if prop.name in seen:
            raise ValueError(f"Duplicate property '{prop.name}' in {owner}")
        seen.add(prop.name)


# Shared primitive instances
STRING = PrimitiveType(PrimitiveKind.STRING)
NUMBER = PrimitiveType(PrimitiveKind.NUMBER)
BOOLEAN = PrimitiveType(PrimitiveKind.BOOLEAN)
DATE = PrimitiveType(PrimitiveKind.DATE)
NULL = PrimitiveType(PrimitiveKind.NULL)
UNDEFINED = PrimitiveType(PrimitiveKind.UNDEFINED)
ANY = PrimitiveType(PrimitiveKind.ANY)
NEVER = NeverType()
