"""
TypeScript source reader.

Parses TypeScript files with tree-sitter and exposes their classes through the
ClassDeclarationHandle / TypeHandle interfaces. This is a syntactic reader, not
a type checker: named types resolve to type aliases, interfaces, classes and
enums declared in the same file or imported by name from a relative module.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser

from ..analyzer.handles import IndexSignature, TypeHandle
from ..analyzer.ir_nodes import LiteralValue
from ..errors import SourceParseError, UnsupportedTypeError
from .type_handles import (
    ConstantHandle,
    KeywordHandle,
    Member,
    SyntaxTypeHandle,
    node_text,
    parse_number,
    string_value,
)

log = structlog.get_logger("ts_class_to_schema.source")

TYPESCRIPT = Language(ts_typescript.language_typescript())
TSX = Language(ts_typescript.language_tsx())

CLASS_NODES = {"class_declaration", "abstract_class_declaration", "class"}
DECLARATION_KINDS = {
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "interface_declaration": "interface",
    "type_alias_declaration": "alias",
    "enum_declaration": "enum",
}

# Extension rewrites for ESM-style specifiers ('./user.js' -> './user.ts')
SPECIFIER_EXTENSIONS = {".js": ".ts", ".mjs": ".mts", ".cjs": ".cts", ".jsx": ".tsx"}
MODULE_SUFFIXES = (".ts", ".tsx", ".d.ts", ".mts", ".cts")


@dataclass
class Declaration:
    """A named top-level type declaration."""

    name: str
    kind: str  # "class", "interface", "alias" or "enum"
    node: Node
    source: TypeScriptSource
    exported: bool = False


@dataclass
class ImportBinding:
    specifier: str
    imported_name: str


class TypeScriptProject:
    """Cache of parsed source files, shared so that imports are parsed once."""

    def __init__(self):
        self._sources: dict[Path, TypeScriptSource] = {}

    def load(self, path: str | Path) -> TypeScriptSource:
        """
        Parse a file, or return the cached parse.

        Raises:
            SourceParseError: If the file has syntax errors
            OSError: If the file cannot be read
        """
        resolved = Path(path).resolve()
        source = self._sources.get(resolved)
        if source is None:
            source = TypeScriptSource(Path(path), resolved.read_bytes(), project=self)
            self._sources[resolved] = source
        return source


class TypeScriptSource:
    """One parsed TypeScript file."""

    def __init__(self, path: Path, code: bytes, project: TypeScriptProject | None = None):
        self.path = path
        self.code = code
        self.project = project or TypeScriptProject()

        language = TSX if path.suffix == ".tsx" else TYPESCRIPT
        self.tree = Parser(language).parse(code)
        if self.tree.root_node.has_error:
            error = self._find_error(self.tree.root_node)
            if error is not None:
                raise SourceParseError(str(path), error.start_point[0] + 1, node_text(error)[:50])

        self.declarations: dict[str, Declaration] = {}
        self.imports: dict[str, ImportBinding] = {}
        self._classes: list[tuple[Node, bool]] = []
        self._collect(self.tree.root_node)

    @classmethod
    def from_string(cls, code: str, path: str = "<string>.ts") -> TypeScriptSource:
        return cls(Path(path), code.encode("utf8"))

    def _find_error(self, node: Node) -> Node | None:
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            error = self._find_error(child)
            if error is not None:
                return error
        return None

    # Collection

    def _collect(self, root: Node) -> None:
        exported_names: set[str] = set()

        for node in root.named_children:
            exported = False
            if node.type == "export_statement":
                exported_names.update(self._export_clause_names(node))
                inner = node.child_by_field_name("declaration") or node.child_by_field_name("value")
                if inner is None:
                    continue
                node, exported = inner, True
            if node.type == "ambient_declaration" and node.named_children:
                node = node.named_children[0]

            if node.type == "import_statement":
                self._collect_import(node)
                continue

            if node.type in CLASS_NODES:
                self._classes.append((node, exported))

            kind = DECLARATION_KINDS.get(node.type)
            name = node.child_by_field_name("name")
            if kind is not None and name is not None:
                self.declarations[node_text(name)] = Declaration(node_text(name), kind, node, self, exported)

        for name in exported_names:
            if name in self.declarations:
                self.declarations[name].exported = True
        self._classes = [
            (node, exported or self._class_name(node) in exported_names) for node, exported in self._classes
        ]

    def _export_clause_names(self, node: Node) -> set[str]:
        names = set()
        for clause in node.named_children:
            if clause.type != "export_clause":
                continue
            for specifier in clause.named_children:
                name = specifier.child_by_field_name("name")
                if name is not None:
                    names.add(node_text(name))
        return names

    def _collect_import(self, node: Node) -> None:
        source = node.child_by_field_name("source")
        if source is None:
            return
        specifier = string_value(source)
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for named in clause.named_children:
                if named.type != "named_imports":
                    continue
                for spec in named.named_children:
                    name = spec.child_by_field_name("name")
                    alias = spec.child_by_field_name("alias")
                    if name is None:
                        continue
                    local = node_text(alias) if alias is not None else node_text(name)
                    self.imports[local] = ImportBinding(specifier, node_text(name))

    @staticmethod
    def _class_name(node: Node) -> str | None:
        name = node.child_by_field_name("name")
        return node_text(name) if name is not None else None

    # Classes

    def classes(self) -> list[SyntaxClassDeclaration]:
        """All top-level classes in declaration order, exported or not."""
        return [SyntaxClassDeclaration(self, node, exported) for node, exported in self._classes]

    # Name lookup

    def lookup(self, name: str) -> Declaration | None:
        """Find the declaration a type name refers to, following relative imports."""
        declaration = self.declarations.get(name)
        if declaration is not None:
            return declaration

        binding = self.imports.get(name)
        if binding is None:
            return None
        module_path = self._resolve_module(binding.specifier)
        if module_path is None:
            log.debug("import_unresolved", source=str(self.path), specifier=binding.specifier)
            return None
        return self.project.load(module_path).declarations.get(binding.imported_name)

    def _resolve_module(self, specifier: str) -> Path | None:
        if not specifier.startswith("."):
            return None
        base = self.path.parent / specifier
        candidates = []
        if base.suffix in SPECIFIER_EXTENSIONS:
            candidates.append(base.with_suffix(SPECIFIER_EXTENSIONS[base.suffix]))
        candidates.extend(Path(f"{base}{suffix}") for suffix in MODULE_SUFFIXES)
        candidates.extend(base / f"index{suffix}" for suffix in MODULE_SUFFIXES)
        candidates.append(base)
        return next((c for c in candidates if c.is_file()), None)

    # Members

    def declaration_body(self, declaration: Declaration) -> Node | None:
        body = declaration.node.child_by_field_name("body")
        if body is None:
            body = next((c for c in declaration.node.named_children if c.type in ("interface_body", "object_type", "class_body")), None)
        return body

    def declaration_members(self, declaration: Declaration, _visited: frozenset[str] = frozenset()) -> list[Member]:
        """Members of an interface or class used as a type, inherited members first."""
        visited = _visited | {f"{declaration.source.path}:{declaration.name}"}
        members: dict[str, Member] = {}

        for base in self._base_declarations(declaration):
            if f"{base.source.path}:{base.name}" in visited:
                raise UnsupportedTypeError(declaration.name, f"circular inheritance through {base.name}")
            for member in base.source.declaration_members(base, visited):
                members[member.name] = member

        body = self.declaration_body(declaration)
        if body is not None:
            own = self.class_members(body) if declaration.kind == "class" else self.object_type_members(body)
            for member in own:
                members[member.name] = member
        return list(members.values())

    def _base_declarations(self, declaration: Declaration) -> list[Declaration]:
        names: list[str] = []
        for child in declaration.node.named_children:
            if child.type == "extends_type_clause":
                names.extend(self._heritage_name(t) for t in child.named_children)
            elif child.type == "class_heritage":
                for clause in child.named_children:
                    if clause.type == "extends_clause":
                        names.extend(self._heritage_name(t) for t in clause.named_children if t.type != "type_arguments")

        bases = []
        for name in names:
            base = self.lookup(name)
            if base is None or base.kind not in ("interface", "class"):
                raise UnsupportedTypeError(name, f"unknown base type of {declaration.name}")
            bases.append(base)
        return bases

    @staticmethod
    def _heritage_name(node: Node) -> str:
        if node.type == "generic_type":
            name = node.child_by_field_name("name")
            if name is not None:
                return node_text(name)
        return node_text(node)

    def object_type_members(self, body: Node) -> list[Member]:
        members = []
        for child in body.named_children:
            if child.type not in ("property_signature", "method_signature"):
                continue
            name = self._member_name(child)
            optional = any(c.type == "?" for c in child.children)
            if child.type == "method_signature":
                # Methods resolve to nothing the IR supports and fail with their signature text
                members.append(Member(name, SyntaxTypeHandle(self, child), optional))
                continue
            annotation = child.child_by_field_name("type")
            type_handle: TypeHandle = SyntaxTypeHandle(self, annotation) if annotation is not None else KeywordHandle("any")
            members.append(Member(name, type_handle, optional))
        return members

    def class_members(self, body: Node) -> list[Member]:
        return [
            Member(p.name, p.type(), p.has_question_token())
            for p in (SyntaxPropertyDeclaration(self, c) for c in body.named_children if is_instance_field(c))
        ]

    def index_signature(self, body: Node) -> IndexSignature | None:
        for child in body.named_children:
            if child.type != "index_signature":
                continue
            if any(c.type == "mapped_type_clause" for c in child.named_children):
                raise UnsupportedTypeError(node_text(child), "mapped types are not supported")

            index_type = child.child_by_field_name("index_type")
            if index_type is None:
                index_type = next((c for c in child.named_children if c.type == "predefined_type"), None)
            value = child.child_by_field_name("type")
            if value is None:
                value = next((c for c in child.named_children if c.type == "type_annotation"), None)
            if index_type is None or value is None:
                raise UnsupportedTypeError(node_text(child), "malformed index signature")

            key = node_text(index_type)
            if key not in ("string", "number"):
                raise UnsupportedTypeError(node_text(child), "index keys must be string or number")
            return IndexSignature(key, SyntaxTypeHandle(self, value))
        return None

    def enum_members(self, declaration: Declaration) -> list[TypeHandle]:
        body = declaration.node.child_by_field_name("body")
        if body is None:
            return []

        members: list[TypeHandle] = []
        next_value: int | float | None = 0
        for child in body.named_children:
            if child.type == "enum_assignment":
                value_node = child.child_by_field_name("value")
                if value_node is not None and value_node.type == "string":
                    members.append(ConstantHandle(string_value(value_node)))
                    next_value = None
                    continue
                if value_node is not None and value_node.type == "number":
                    number = parse_number(node_text(value_node))
                    members.append(ConstantHandle(number))
                    next_value = number + 1
                    continue
                raise UnsupportedTypeError(node_text(child), "computed enum members are not supported")
            elif child.type == "property_identifier":
                if next_value is None:
                    raise UnsupportedTypeError(node_text(child), "enum member needs an initializer")
                members.append(ConstantHandle(next_value))
                next_value += 1
        return members

    @staticmethod
    def _member_name(node: Node) -> str:
        name = node.child_by_field_name("name")
        if name is None:
            return ""
        if name.type == "string":
            return string_value(name)
        return node_text(name)


def is_instance_field(node: Node) -> bool:
    """True for non-static, non-#private class field declarations."""
    if node.type != "public_field_definition":
        return False
    if any(c.type == "static" for c in node.children):
        return False
    name = node.child_by_field_name("name")
    return name is not None and name.type != "private_property_identifier"


class SyntaxPropertyDeclaration:
    """A class field declaration."""

    def __init__(self, source: TypeScriptSource, node: Node):
        self.source = source
        self.node = node

    @property
    def name(self) -> str:
        return TypeScriptSource._member_name(self.node)

    def type(self) -> TypeHandle:
        annotation = self.node.child_by_field_name("type")
        if annotation is not None:
            return SyntaxTypeHandle(self.source, annotation)
        return infer_initializer_type(self.node.child_by_field_name("value"), readonly=self.is_readonly())

    def has_question_token(self) -> bool:
        return any(c.type == "?" for c in self.node.children)

    def is_readonly(self) -> bool:
        return any(c.type == "readonly" for c in self.node.children)

    def has_initializer(self) -> bool:
        return self.node.child_by_field_name("value") is not None


def infer_initializer_type(value: Node | None, readonly: bool = False) -> TypeHandle:
    """
    Type of an unannotated field.

    Mutable fields are widened the way TypeScript widens them; a readonly
    field initialized with a primitive literal keeps the literal type.
    """
    if value is None:
        return KeywordHandle("any")
    if readonly:
        literal = initializer_literal(value)
        if literal is not None:
            return ConstantHandle(literal)
    if value.type in ("string", "template_string"):
        return KeywordHandle("string")
    if value.type in ("number", "unary_expression") and initializer_literal(value) is not None:
        return KeywordHandle("number")
    if value.type in ("true", "false"):
        return KeywordHandle("boolean")
    if value.type == "new_expression":
        constructor = value.child_by_field_name("constructor")
        if constructor is not None and node_text(constructor) == "Date":
            return KeywordHandle("Date")
    return KeywordHandle("any")


def initializer_literal(value: Node) -> LiteralValue | None:
    if value.type == "string":
        return string_value(value)
    if value.type == "number":
        return parse_number(node_text(value))
    if value.type in ("true", "false"):
        return value.type == "true"
    if value.type == "unary_expression" and node_text(value).startswith("-"):
        argument = value.child_by_field_name("argument")
        if argument is not None and argument.type == "number":
            return -parse_number(node_text(argument))
    return None


@dataclass
class SyntaxClassDeclaration:
    """A class declaration found in a source file."""

    source: TypeScriptSource
    node: Node
    exported: bool = False
    _properties: list[SyntaxPropertyDeclaration] | None = field(default=None, repr=False)

    @property
    def name(self) -> str | None:
        return TypeScriptSource._class_name(self.node)

    @property
    def source_location(self) -> str:
        return f"{self.source.path}:{self.node.start_point[0] + 1}"

    def is_exported(self) -> bool:
        return self.exported

    def properties(self) -> Sequence[SyntaxPropertyDeclaration]:
        if self._properties is None:
            body = self.node.child_by_field_name("body")
            children = body.named_children if body is not None else []
            self._properties = [SyntaxPropertyDeclaration(self.source, c) for c in children if is_instance_field(c)]
        return self._properties
