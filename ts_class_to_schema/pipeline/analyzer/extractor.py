"""
Class extractor.

Turns class declarations into ParsedClass records: resolves every declared
property through the TypeResolver and narrows optional properties.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import AnonymousDeclarationError
from .handles import ClassDeclarationHandle, PropertyDeclarationHandle
from .ir_nodes import NEVER, ParsedClass, PrimitiveKind, PrimitiveType, Property, PropertyType, UnionType
from .resolver import TypeResolver

_NULLISH = (PrimitiveKind.NULL, PrimitiveKind.UNDEFINED)


def narrow_optional(property_type: PropertyType) -> PropertyType:
    """
    Drop null/undefined members from the union type of an optional property.

    A single survivor replaces the union; a union made only of null/undefined
    members narrows to never.
    """
    if not isinstance(property_type, UnionType):
        return property_type

    survivors = tuple(m for m in property_type.members if not (isinstance(m, PrimitiveType) and m.name in _NULLISH))
    if not survivors:
        return NEVER
    if len(survivors) == 1:
        return survivors[0]
    return UnionType(survivors)


class ClassExtractor:
    """Extracts ParsedClass records from class declaration handles."""

    def __init__(self, resolver: TypeResolver | None = None):
        self.resolver = resolver or TypeResolver()

    def extract_all(self, declarations: Iterable[ClassDeclarationHandle]) -> list[ParsedClass]:
        """Extract every exported class, in declaration order."""
        return [self.extract(d) for d in declarations if d.is_exported()]

    def extract(self, declaration: ClassDeclarationHandle) -> ParsedClass:
        """
        Extract one class.

        Raises:
            AnonymousDeclarationError: If the class has no name
            UnsupportedTypeError: If a property type cannot be resolved
        """
        if not declaration.name:
            raise AnonymousDeclarationError(declaration.source_location)

        return ParsedClass(
            name=declaration.name,
            source_location=declaration.source_location,
            is_exported=declaration.is_exported(),
            properties=tuple(self._extract_property(p) for p in declaration.properties()),
        )

    def _extract_property(self, declaration: PropertyDeclarationHandle) -> Property:
        is_optional = declaration.has_question_token()
        property_type = self.resolver.resolve(declaration.type())
        if is_optional:
            property_type = narrow_optional(property_type)

        return Property(
            name=declaration.name,
            type=property_type,
            is_optional=is_optional,
            is_readonly=declaration.is_readonly(),
            has_default_value=declaration.has_initializer(),
        )
