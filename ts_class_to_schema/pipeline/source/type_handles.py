"""
Syntactic type handles over a tree-sitter TypeScript tree.

Each handle wraps one type node and answers the structural queries of the
TypeHandle protocol from syntax alone. Named references are looked up in the
declaring source file, following relative imports.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Node

from ..analyzer.handles import IndexSignature, TypeHandle
from ..analyzer.ir_nodes import LiteralValue

if TYPE_CHECKING:
    from .typescript_source import Declaration, TypeScriptSource

ARRAY_GENERICS = {"Array", "ReadonlyArray"}

PREDEFINED_KEYWORDS = {"any", "never", "string", "number", "boolean", "null", "undefined"}


def node_text(node: Node) -> str:
    return node.text.decode("utf8") if node.text is not None else ""


def unwrap_annotation(node: Node) -> Node:
    """Return the type node inside a ``: T`` annotation."""
    if node.type == "type_annotation" and node.named_children:
        return node.named_children[0]
    return node


def parse_number(text: str) -> int | float:
    text = text.replace("_", "")
    try:
        return int(text, 0)
    except ValueError:
        return float(text)


def string_value(node: Node) -> str:
    """Content of a string literal node, without its quotes."""
    return node_text(node)[1:-1]


class BaseHandle:
    """TypeHandle answering 'no' to every structural query."""

    def text(self) -> str:
        raise NotImplementedError

    def identity(self) -> Hashable | None:
        return None

    def alias_name(self) -> str | None:
        return None

    def alias_type_arguments(self) -> Sequence[TypeHandle]:
        return ()

    def alias_target(self) -> TypeHandle | None:
        return None

    def is_never(self) -> bool:
        return False

    def is_any(self) -> bool:
        return False

    def is_null(self) -> bool:
        return False

    def is_undefined(self) -> bool:
        return False

    def is_string(self) -> bool:
        return False

    def is_number(self) -> bool:
        return False

    def is_boolean(self) -> bool:
        return False

    def array_element(self) -> TypeHandle | None:
        return None

    def intersection_members(self) -> Sequence[TypeHandle] | None:
        return None

    def union_members(self) -> Sequence[TypeHandle] | None:
        return None

    def template_elements(self) -> Sequence[str | TypeHandle] | None:
        return None

    def is_literal(self) -> bool:
        return False

    def literal_value(self) -> LiteralValue | None:
        return None

    def is_object(self) -> bool:
        return False

    def object_members(self) -> Sequence[Member]:
        return ()

    def index_signature(self) -> IndexSignature | None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text()!r})"


class KeywordHandle(BaseHandle):
    """A type known only by its keyword, e.g. inferred from an initializer."""

    def __init__(self, keyword: str):
        self.keyword = keyword

    def text(self) -> str:
        return self.keyword

    def is_any(self) -> bool:
        return self.keyword == "any"

    def is_string(self) -> bool:
        return self.keyword == "string"

    def is_number(self) -> bool:
        return self.keyword == "number"

    def is_boolean(self) -> bool:
        return self.keyword == "boolean"


class ConstantHandle(BaseHandle):
    """A literal type with a computed value, e.g. an enum member."""

    def __init__(self, value: LiteralValue):
        self.value = value

    def text(self) -> str:
        return repr(self.value) if isinstance(self.value, str) else str(self.value)

    def is_literal(self) -> bool:
        return True

    def literal_value(self) -> LiteralValue | None:
        return self.value


@dataclass(frozen=True)
class Member:
    """A named member of an object type, interface or class."""

    name: str
    type: TypeHandle
    is_optional: bool


class SyntaxTypeHandle(BaseHandle):
    """TypeHandle over a tree-sitter type node."""

    def __init__(self, source: TypeScriptSource, node: Node):
        self.source = source
        node = unwrap_annotation(node)
        while node.type == "parenthesized_type" and node.named_children:
            node = node.named_children[0]
        self.node = node

    def _child(self, node: Node) -> SyntaxTypeHandle:
        return SyntaxTypeHandle(self.source, node)

    def text(self) -> str:
        return node_text(self.node)

    # Named references

    def _reference_name(self) -> str | None:
        if self.node.type == "type_identifier":
            return node_text(self.node)
        if self.node.type == "generic_type":
            name = self.node.child_by_field_name("name")
            if name is None and self.node.named_children:
                name = self.node.named_children[0]
            return node_text(name) if name is not None else None
        return None

    def _declaration(self) -> Declaration | None:
        name = self._reference_name()
        if name is None:
            return None
        return self.source.lookup(name)

    def identity(self) -> Hashable | None:
        declaration = self._declaration()
        if declaration is None:
            return None
        return (str(declaration.source.path), declaration.name)

    def alias_name(self) -> str | None:
        if self.node.type == "generic_type":
            return self._reference_name()
        declaration = self._declaration()
        if declaration is not None and declaration.kind == "alias":
            return declaration.name
        return None

    def alias_type_arguments(self) -> Sequence[TypeHandle]:
        if self.node.type != "generic_type":
            return ()
        arguments = self.node.child_by_field_name("type_arguments")
        if arguments is None:
            arguments = next((c for c in self.node.named_children if c.type == "type_arguments"), None)
        if arguments is None:
            return ()
        return [self._child(c) for c in arguments.named_children]

    def alias_target(self) -> TypeHandle | None:
        declaration = self._declaration()
        if declaration is None or declaration.kind != "alias":
            return None
        # Generic aliases are not expanded, their parameters are never substituted
        if declaration.node.child_by_field_name("type_parameters") is not None:
            return None
        value = declaration.node.child_by_field_name("value")
        if value is None:
            return None
        return SyntaxTypeHandle(declaration.source, value)

    # Keywords and literals

    def _keyword(self) -> str | None:
        if self.node.type in ("predefined_type", "type_identifier"):
            text = node_text(self.node)
            return text if text in PREDEFINED_KEYWORDS else None
        if self.node.type == "literal_type" and self.node.named_children:
            inner = self.node.named_children[0].type
            return inner if inner in ("null", "undefined") else None
        return None

    def is_never(self) -> bool:
        return self._keyword() == "never"

    def is_any(self) -> bool:
        return self._keyword() == "any"

    def is_null(self) -> bool:
        return self._keyword() == "null"

    def is_undefined(self) -> bool:
        return self._keyword() == "undefined"

    def is_string(self) -> bool:
        return self._keyword() == "string"

    def is_number(self) -> bool:
        return self._keyword() == "number"

    def is_boolean(self) -> bool:
        return self._keyword() == "boolean"

    def _literal_node(self) -> Node | None:
        node = self.node
        if node.type == "literal_type" and node.named_children:
            node = node.named_children[0]
        if node.type in ("string", "number", "true", "false", "unary_expression"):
            return node
        return None

    def is_literal(self) -> bool:
        return self.literal_value() is not None

    def literal_value(self) -> LiteralValue | None:
        node = self._literal_node()
        if node is None:
            return None
        if node.type == "string":
            return string_value(node)
        if node.type == "number":
            return parse_number(node_text(node))
        if node.type in ("true", "false"):
            return node.type == "true"
        # Negative numbers are the only unary expressions allowed in type position
        text = node_text(node).replace(" ", "")
        if text.startswith("-"):
            return -parse_number(text[1:])
        return None

    # Composite shapes

    def _inner(self) -> SyntaxTypeHandle | None:
        if self.node.type == "readonly_type" and self.node.named_children:
            return self._child(self.node.named_children[0])
        return None

    def array_element(self) -> TypeHandle | None:
        inner = self._inner()
        if inner is not None:
            return inner.array_element()
        if self.node.type == "array_type" and self.node.named_children:
            return self._child(self.node.named_children[0])
        if self.node.type == "generic_type" and self._reference_name() in ARRAY_GENERICS:
            arguments = self.alias_type_arguments()
            if len(arguments) == 1:
                return arguments[0]
        return None

    def _flatten(self, node_type: str) -> list[TypeHandle] | None:
        if self.node.type != node_type:
            return None

        members: list[TypeHandle] = []
        for child in self.node.named_children:
            handle = self._child(child)
            if handle.node.type == node_type:
                members.extend(handle._flatten(node_type) or [])
            else:
                members.append(handle)
        return members

    def intersection_members(self) -> Sequence[TypeHandle] | None:
        return self._flatten("intersection_type")

    def union_members(self) -> Sequence[TypeHandle] | None:
        members = self._flatten("union_type")
        if members is not None:
            return members
        declaration = self._declaration()
        if declaration is not None and declaration.kind == "enum":
            return declaration.source.enum_members(declaration)
        return None

    def template_elements(self) -> Sequence[str | TypeHandle] | None:
        if self.node.type != "template_literal_type":
            return None

        code = self.source.code
        parts: list[str | TypeHandle] = []
        cursor = self.node.start_byte + 1
        for child in self.node.children:
            if child.type != "template_type":
                continue
            fragment = code[cursor : child.start_byte].decode("utf8")
            if fragment:
                parts.append(fragment)
            parts.extend(self._child(c) for c in child.named_children)
            cursor = child.end_byte
        fragment = code[cursor : self.node.end_byte - 1].decode("utf8")
        if fragment:
            parts.append(fragment)
        return parts

    def is_object(self) -> bool:
        inner = self._inner()
        if inner is not None:
            return inner.is_object()
        if self.node.type == "object_type":
            return True
        declaration = self._declaration()
        return declaration is not None and declaration.kind in ("interface", "class")

    def object_members(self) -> Sequence[Member]:
        inner = self._inner()
        if inner is not None:
            return inner.object_members()
        if self.node.type == "object_type":
            return self.source.object_type_members(self.node)
        declaration = self._declaration()
        if declaration is not None and declaration.kind in ("interface", "class"):
            return declaration.source.declaration_members(declaration)
        return ()

    def index_signature(self) -> IndexSignature | None:
        inner = self._inner()
        if inner is not None:
            return inner.index_signature()
        if self.node.type == "object_type":
            return self.source.index_signature(self.node)
        declaration = self._declaration()
        if declaration is not None and declaration.kind == "interface":
            body = declaration.source.declaration_body(declaration)
            return declaration.source.index_signature(body) if body is not None else None
        return None
