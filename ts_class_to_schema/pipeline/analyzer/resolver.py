"""
Type resolver.

Maps a TypeHandle onto the closed IR. The checks run in a fixed order and the
first match wins: several of them are not mutually exclusive at the handle
level (a Date is also an object, a boolean is also a union of two literals for
some facilities), so reordering them changes the output.
"""

from __future__ import annotations

from collections.abc import Hashable

from ..errors import CircularTypeError, UnsupportedTypeError
from .handles import TypeHandle
from .ir_nodes import (
    ANY,
    BOOLEAN,
    DATE,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    UNDEFINED,
    ArrayType,
    IntersectionType,
    LiteralType,
    ObjectType,
    Property,
    PropertyType,
    RecordType,
    TemplateLiteralType,
    UnionType,
)

RECORD_ALIAS = "Record"
DATE_TYPE_NAME = "Date"


class TypeResolver:
    """Resolves type handles into IR nodes.

    The resolver keeps no state between calls: resolving the same handle twice
    yields structurally equal IR. The chain of named declarations being expanded
    is threaded through the recursion so that self-referential declarations fail
    with CircularTypeError instead of recursing without bound.
    """

    def resolve(self, handle: TypeHandle) -> PropertyType:
        """
        Resolve a type handle.

        Args:
            handle: The type to classify

        Returns:
            The IR node for the type

        Raises:
            UnsupportedTypeError: If the type is outside the supported shapes
        """
        return self._resolve(handle, ())

    def _resolve(self, handle: TypeHandle, chain: tuple[tuple[Hashable, str], ...]) -> PropertyType:
        identity = handle.identity()
        if identity is not None:
            if any(key == identity for key, _ in chain):
                names = [text for _, text in chain] + [handle.text()]
                raise CircularTypeError(handle.text(), names)
            chain = chain + ((identity, handle.text()),)

        # Aliases are transparent, except the built-in Record<K, V>
        alias_name = handle.alias_name()
        if alias_name is not None:
            type_args = list(handle.alias_type_arguments())
            if alias_name == RECORD_ALIAS and len(type_args) == 2:
                return self._record(handle, self._resolve(type_args[0], chain), self._resolve(type_args[1], chain))
            target = handle.alias_target()
            if target is not None:
                return self._resolve(target, chain)

        if handle.is_never():
            return NEVER

        if handle.is_any():
            return ANY
        if handle.is_null():
            return NULL
        if handle.is_undefined():
            return UNDEFINED
        if handle.is_string():
            return STRING
        if handle.is_number():
            return NUMBER
        if handle.is_boolean():
            return BOOLEAN

        # Textual check, must run before the structural object check
        if handle.text() == DATE_TYPE_NAME:
            return DATE

        element = handle.array_element()
        if element is not None:
            return ArrayType(self._resolve(element, chain))

        members = handle.intersection_members()
        if members is not None:
            return IntersectionType(tuple(self._resolve(m, chain) for m in members))

        members = handle.union_members()
        if members is not None:
            return UnionType(tuple(self._resolve(m, chain) for m in members))

        parts = handle.template_elements()
        if parts is not None:
            elements = []
            for part in parts:
                if isinstance(part, str):
                    elements.append(LiteralType(part))
                else:
                    elements.append(self._resolve(part, chain))
            return TemplateLiteralType(tuple(elements))

        if handle.is_literal():
            value = handle.literal_value()
            if isinstance(value, (str, int, float, bool)):
                return LiteralType(value)

        if handle.is_object():
            return self._resolve_object(handle, chain)

        raise UnsupportedTypeError(handle.text())

    def _resolve_object(self, handle: TypeHandle, chain: tuple[tuple[Hashable, str], ...]) -> PropertyType:
        members = list(handle.object_members())
        signature = handle.index_signature()

        if signature is not None and not members:
            key_type = STRING if signature.key_kind == "string" else NUMBER
            return RecordType(key_type, self._resolve(signature.value_type, chain))

        properties = tuple(
            Property(
                name=member.name,
                type=self._resolve(member.type, chain),
                is_optional=member.is_optional,
            )
            for member in members
        )
        return ObjectType(properties)

    def _record(self, handle: TypeHandle, key_type: PropertyType, value_type: PropertyType) -> RecordType:
        if key_type not in (STRING, NUMBER):
            raise UnsupportedTypeError(handle.text(), "record keys must be string or number")
        return RecordType(key_type, value_type)
