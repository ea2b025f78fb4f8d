"""
Schema backend traversal.

All backends share one recursive renderer. What differs between target
libraries (constructor names, optional-wrapper syntax, enum support, n-ary vs
binary intersections, missing constructs) lives in a Dialect rendering table,
so each target is a value rather than a subclass.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import jinja2

from ..analyzer.ir_nodes import (
    STRING,
    ArrayType,
    IntersectionType,
    LiteralType,
    LiteralValue,
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
from ..errors import MissingBackendCapabilityError

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

SCHEMA_SUFFIX = "Schema"

MODULE_TEMPLATE = "schema_module.ts.jinja2"


@dataclass(frozen=True)
class Dialect:
    """Rendering table for one target library.

    Every constructor is a str.format template taking the rendered operands.
    A constructor set to None means the library has no such construct.
    """

    name: str
    imports: tuple[str, ...]

    # PrimitiveKind -> full call, e.g. "t.String()"
    primitives: dict[PrimitiveKind, str]

    # Object constructor name, called as <object>({ ... })
    object: str

    array: str
    optional: str  # "t.Optional({})" wraps, "{}.optional()" trails
    union: str
    literal: str
    record: str

    # Intersection: n-ary over a joined list, or a binary combinator folded left
    intersection: str
    binary_intersection: bool = False

    # Compact enumeration over literal values and the runtime types it accepts
    enum: str | None = None
    enum_value_types: frozenset[str] = field(default_factory=frozenset)

    template_literal: str | None = None
    never: str | None = None

    def __post_init__(self):
        missing = [k.value for k in PrimitiveKind if k not in self.primitives]
        if missing:
            raise ValueError(f"Dialect '{self.name}' has no primitive for: {', '.join(missing)}")


class SchemaBackend:
    """Generates schema source code for one target library from the IR."""

    def __init__(self, dialect: Dialect):
        """
        Initialize the backend.

        Args:
            dialect: Rendering table of the target library
        """
        self.dialect = dialect
        self._setup_templates()

    @property
    def name(self) -> str:
        return self.dialect.name

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates"
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            autoescape=False,
        )
        self.module_template = self.jinja_env.get_template(MODULE_TEMPLATE)

    def supports(self, name: str) -> bool:
        return name == self.dialect.name

    def imports(self) -> list[str]:
        """Import statements required by generated schemas."""
        return list(self.dialect.imports)

    def schema_identifier(self, class_name: str) -> str:
        """Convert a class name to its schema variable name (User -> userSchema)."""
        return class_name[:1].lower() + class_name[1:] + SCHEMA_SUFFIX

    def generate(self, parsed_class: ParsedClass) -> str:
        """
        Generate a complete schema module for one class.

        Args:
            parsed_class: The parsed class

        Returns:
            Imports, a blank line, and the schema declaration

        Raises:
            MissingBackendCapabilityError: If a property type cannot be rendered
        """
        return self.render_module([parsed_class])

    def render_module(self, classes: Sequence[ParsedClass]) -> str:
        """Generate one module holding the schemas of several classes."""
        # Render everything before templating so a failure leaves no partial output
        declarations = [self.render_declaration(c) for c in classes]
        return self.module_template.render(imports=self.imports(), declarations=declarations)

    def render_declaration(self, parsed_class: ParsedClass) -> str:
        """Render the ``export const`` statement of one class."""
        identifier = self.schema_identifier(parsed_class.name)
        properties = self._render_properties(parsed_class.properties)
        return f"export const {identifier} = {self.dialect.object}({{ \n{properties} }});"

    def render(self, type_ref: PropertyType) -> str:
        """
        Render an IR type as a schema expression.

        Args:
            type_ref: The type to render

        Returns:
            Source code of the schema expression
        """
        d = self.dialect

        if type_ref.kind == TypeKind.PRIMITIVE:
            assert isinstance(type_ref, PrimitiveType)
            return d.primitives[type_ref.name]

        if type_ref.kind == TypeKind.ARRAY:
            assert isinstance(type_ref, ArrayType)
            return d.array.format(self.render(type_ref.element_type))

        if type_ref.kind == TypeKind.OBJECT:
            assert isinstance(type_ref, ObjectType)
            return f"{d.object}({{\n{self._render_properties(type_ref.properties)}\n}})"

        if type_ref.kind == TypeKind.UNION:
            assert isinstance(type_ref, UnionType)
            return self._render_union(type_ref)

        if type_ref.kind == TypeKind.INTERSECTION:
            assert isinstance(type_ref, IntersectionType)
            return self._render_intersection(type_ref)

        if type_ref.kind == TypeKind.LITERAL:
            assert isinstance(type_ref, LiteralType)
            return d.literal.format(format_literal(type_ref.value))

        if type_ref.kind == TypeKind.RECORD:
            assert isinstance(type_ref, RecordType)
            return d.record.format(self.render(type_ref.key_type), self.render(type_ref.value_type))

        if type_ref.kind == TypeKind.TEMPLATE_LITERAL:
            assert isinstance(type_ref, TemplateLiteralType)
            if d.template_literal is None:
                return self.render(STRING)
            return d.template_literal.format(", ".join(self.render(e) for e in type_ref.elements))

        if type_ref.kind == TypeKind.NEVER:
            assert isinstance(type_ref, NeverType)
            if d.never is None:
                raise MissingBackendCapabilityError(d.name, TypeKind.NEVER.value)
            return d.never

        raise AssertionError(f"Unhandled IR type kind: {type_ref.kind}")

    def _render_properties(self, properties: Sequence[Property]) -> str:
        return ",\n".join(self._render_property(p) for p in properties)

    def _render_property(self, prop: Property) -> str:
        code = self.render(prop.type)
        if prop.is_optional:
            code = self.dialect.optional.format(code)
        return f"  {format_property_name(prop.name)}: {code}"

    def _render_union(self, union: UnionType) -> str:
        d = self.dialect
        if d.enum is not None and all(isinstance(m, LiteralType) for m in union.members):
            values = [m.value for m in union.members]  # type: ignore[union-attr]
            runtime_types = {runtime_type(v) for v in values}
            if len(runtime_types) == 1 and runtime_types <= d.enum_value_types:
                return d.enum.format(", ".join(format_literal(v) for v in values))

        return d.union.format(", ".join(self.render(m) for m in union.members))

    def _render_intersection(self, intersection: IntersectionType) -> str:
        d = self.dialect
        if not d.binary_intersection:
            return d.intersection.format(", ".join(self.render(m) for m in intersection.members))

        first, *rest = intersection.members
        code = self.render(first)
        for member in rest:
            code = d.intersection.format(code, self.render(member))
        return code


def runtime_type(value: LiteralValue) -> str:
    """JavaScript runtime type of a literal value."""
    # bool is checked first, it is a subclass of int
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "number"


def format_literal(value: LiteralValue) -> str:
    """Format a literal value as TypeScript source; strings are single-quoted verbatim."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def format_property_name(name: str) -> str:
    """Quote property names that are not valid identifiers."""
    if IDENTIFIER_RE.match(name):
        return name
    return f"'{name}'"
