"""
Read-only capability interface over a type inspection facility.

The resolver and the extractor only ever talk to these protocols, so they stay
a pure function of whatever the facility reports. The tree-sitter source reader
implements them for real TypeScript files; tests implement them with fixed
in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

from .ir_nodes import LiteralValue


@dataclass(frozen=True)
class IndexSignature:
    """An index signature such as ``[key: string]: T``."""

    key_kind: Literal["string", "number"]
    value_type: TypeHandle


class MemberHandle(Protocol):
    """A named member of a structural object type."""

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> TypeHandle: ...

    @property
    def is_optional(self) -> bool: ...


class TypeHandle(Protocol):
    """Structural queries supported on a native type."""

    def text(self) -> str:
        """Textual form of the type, used for the Date check and in errors."""

    def identity(self) -> Hashable | None:
        """Stable key of the named declaration this type expands, if any."""

    def alias_name(self) -> str | None: ...

    def alias_type_arguments(self) -> Sequence[TypeHandle]: ...

    def alias_target(self) -> TypeHandle | None:
        """The declared shape behind a type alias, None for built-in aliases."""

    def is_never(self) -> bool: ...

    def is_any(self) -> bool: ...

    def is_null(self) -> bool: ...

    def is_undefined(self) -> bool: ...

    def is_string(self) -> bool: ...

    def is_number(self) -> bool: ...

    def is_boolean(self) -> bool: ...

    def array_element(self) -> TypeHandle | None: ...

    def intersection_members(self) -> Sequence[TypeHandle] | None: ...

    def union_members(self) -> Sequence[TypeHandle] | None: ...

    def template_elements(self) -> Sequence[str | TypeHandle] | None:
        """Template literal parts: plain strings for fragments, handles for ``${...}``."""

    def is_literal(self) -> bool: ...

    def literal_value(self) -> LiteralValue | None: ...

    def is_object(self) -> bool: ...

    def object_members(self) -> Sequence[MemberHandle]: ...

    def index_signature(self) -> IndexSignature | None: ...


class PropertyDeclarationHandle(Protocol):
    """A property declared on a class."""

    @property
    def name(self) -> str: ...

    def type(self) -> TypeHandle: ...

    def has_question_token(self) -> bool: ...

    def is_readonly(self) -> bool: ...

    def has_initializer(self) -> bool: ...


class ClassDeclarationHandle(Protocol):
    """A class declaration in a source file."""

    @property
    def name(self) -> str | None: ...

    @property
    def source_location(self) -> str: ...

    def is_exported(self) -> bool: ...

    def properties(self) -> Sequence[PropertyDeclarationHandle]: ...
