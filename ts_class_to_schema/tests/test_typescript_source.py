"""
End-to-end tests: TypeScript source text through the tree-sitter reader and
the class extractor.
"""

from pathlib import Path

import pytest

from ts_class_to_schema.pipeline.analyzer import (
    ArrayType,
    ClassExtractor,
    IntersectionType,
    LiteralType,
    ObjectType,
    Property,
    RecordType,
    TemplateLiteralType,
    UnionType,
)
from ts_class_to_schema.pipeline.analyzer.ir_nodes import ANY, BOOLEAN, DATE, NULL, NUMBER, STRING
from ts_class_to_schema.pipeline.backends import get_backend
from ts_class_to_schema.pipeline.errors import (
    AnonymousDeclarationError,
    CircularTypeError,
    SourceParseError,
    UnsupportedTypeError,
)
from ts_class_to_schema.pipeline.source import TypeScriptProject, TypeScriptSource


def extract(code: str, index: int = -1):
    source = TypeScriptSource.from_string(code)
    return ClassExtractor().extract(source.classes()[index])


def property_types(code: str) -> dict:
    return {p.name: p.type for p in extract(code).properties}


class TestClasses:
    def test_exported_and_local_classes(self):
        source = TypeScriptSource.from_string(
            "export class User { id: string; }\n"
            "class Hidden { x: number; }\n"
            "abstract class Base { y: number; }\n"
            "export { Base };\n"
        )
        classes = source.classes()
        assert [c.name for c in classes] == ["User", "Hidden", "Base"]
        assert [c.is_exported() for c in classes] == [True, False, True]

    def test_source_location(self):
        source = TypeScriptSource.from_string("\n\nexport class User {}\n", path="models/user.ts")
        assert source.classes()[0].source_location == "models/user.ts:3"

    def test_user(self):
        parsed = extract(
            """
export class User {
  id: string;
  age?: number;
  readonly createdAt: Date;
  tags: string[] = [];
  static count = 0;
  #secret: string;
  greet(): string { return this.id; }
}
"""
        )
        assert parsed.name == "User"
        assert parsed.properties == (
            Property("id", STRING),
            Property("age", NUMBER, is_optional=True),
            Property("createdAt", DATE, is_readonly=True),
            Property("tags", ArrayType(STRING), has_default_value=True),
        )

    def test_definite_assignment(self):
        assert property_types("export class A { id!: string; }") == {"id": STRING}

    def test_optional_union_is_narrowed(self):
        types = property_types("export class A { nickname?: string | null; note?: string | number | undefined; }")
        assert types["nickname"] == STRING
        assert types["note"] == UnionType((STRING, NUMBER))

    def test_initializer_inference(self):
        types = property_types(
            """
export class Defaults {
  count = 0;
  name = "x";
  active = true;
  created = new Date();
  other = compute();
}
"""
        )
        assert types == {"count": NUMBER, "name": STRING, "active": BOOLEAN, "created": DATE, "other": ANY}

    def test_readonly_initializer_keeps_literal_type(self):
        parsed = extract(
            """
export class Event {
  readonly kind = "user";
  readonly version = 2;
  readonly offset = -1;
  readonly enabled = false;
  readonly created = new Date();
  label = "x";
}
"""
        )
        types = {p.name: p.type for p in parsed.properties}
        assert types == {
            "kind": LiteralType("user"),
            "version": LiteralType(2),
            "offset": LiteralType(-1),
            "enabled": LiteralType(False),
            "created": DATE,
            "label": STRING,
        }
        assert "kind: t.Literal('user')" in get_backend("elysia").render_declaration(parsed)

    def test_anonymous_default_export(self):
        source = TypeScriptSource.from_string("export default class { x: number; }\n")
        declaration = source.classes()[0]
        assert declaration.name is None
        assert declaration.is_exported()
        with pytest.raises(AnonymousDeclarationError):
            ClassExtractor().extract(declaration)

    def test_syntax_error(self):
        with pytest.raises(SourceParseError) as exc_info:
            TypeScriptSource.from_string("export class Broken {\n  id: string\n", path="broken.ts")
        assert exc_info.value.path == "broken.ts"


class TestTypes:
    def test_literals_and_unions(self):
        types = property_types(
            """
export class A {
  role: 'admin' | 'user';
  level: -1 | 1;
  flag: true;
  maybe: string | null;
}
"""
        )
        assert types["role"] == UnionType((LiteralType("admin"), LiteralType("user")))
        assert types["level"] == UnionType((LiteralType(-1), LiteralType(1)))
        assert types["flag"] == LiteralType(True)
        assert types["maybe"] == UnionType((STRING, NULL))

    def test_arrays(self):
        types = property_types(
            """
type Status = 'a' | 'b';

export class A {
  a: number[];
  b: Array<string>;
  c: ReadonlyArray<boolean>;
  d: readonly string[];
  e: (string | number)[];
  f: (string)[];
  g: (Status)[];
  h: (Date);
  i: ((string | number) | null)[];
}
"""
        )
        assert types["a"] == ArrayType(NUMBER)
        assert types["b"] == ArrayType(STRING)
        assert types["c"] == ArrayType(BOOLEAN)
        assert types["d"] == ArrayType(STRING)
        assert types["e"] == ArrayType(UnionType((STRING, NUMBER)))
        assert types["f"] == ArrayType(STRING)
        assert types["g"] == ArrayType(UnionType((LiteralType("a"), LiteralType("b"))))
        assert types["h"] == DATE
        assert types["i"] == ArrayType(UnionType((STRING, NUMBER, NULL)))

    def test_named_declarations(self):
        types = property_types(
            """
type Id = string;
interface Address { street: string; zip?: number }
enum Status { Open = 'open', Closed = 'closed' }
enum Priority { Low, High }

export class Order {
  id: Id;
  address: Address;
  status: Status;
  priority: Priority;
}
"""
        )
        assert types["id"] == STRING
        assert types["address"] == ObjectType((Property("street", STRING), Property("zip", NUMBER, is_optional=True)))
        assert types["status"] == UnionType((LiteralType("open"), LiteralType("closed")))
        assert types["priority"] == UnionType((LiteralType(0), LiteralType(1)))

    def test_records(self):
        types = property_types(
            """
export class A {
  meta: Record<string, number>;
  lookup: { [key: string]: boolean };
  byId: { [id: number]: string };
}
"""
        )
        assert types["meta"] == RecordType(STRING, NUMBER)
        assert types["lookup"] == RecordType(STRING, BOOLEAN)
        assert types["byId"] == RecordType(NUMBER, STRING)

    def test_intersections(self):
        types = property_types(
            """
class User {
  id: string;
  name: string;
}

export class ExtendedUser {
  profile: User & { timestamp: Date; version: number };
  mixed: { base: string } & { extra: number };
}
"""
        )
        assert types["profile"] == IntersectionType(
            (
                ObjectType((Property("id", STRING), Property("name", STRING))),
                ObjectType((Property("timestamp", DATE), Property("version", NUMBER))),
            )
        )
        assert types["mixed"] == IntersectionType(
            (ObjectType((Property("base", STRING),)), ObjectType((Property("extra", NUMBER),)))
        )

    def test_template_literals(self):
        types = property_types(
            """
export class TemplateLiteralDTO {
  /**
   * Simple template literal
   */
  id!: `id-${number}`;
  date!: `${number}-${number}-${number}`;
  status!: `status-${'active' | 'inactive'}`;
}
"""
        )
        assert types["id"] == TemplateLiteralType((LiteralType("id-"), NUMBER))
        assert types["date"] == TemplateLiteralType((NUMBER, LiteralType("-"), NUMBER, LiteralType("-"), NUMBER))
        assert types["status"] == TemplateLiteralType(
            (LiteralType("status-"), UnionType((LiteralType("active"), LiteralType("inactive"))))
        )

    def test_interface_inheritance(self):
        types = property_types(
            """
interface Base { id: string }
interface Named extends Base { name: string }
export class A { value: Named; }
"""
        )
        assert types["value"] == ObjectType((Property("id", STRING), Property("name", STRING)))

    def test_recursive_interface(self):
        with pytest.raises(CircularTypeError):
            extract("interface TreeNode { children: TreeNode[] }\nexport class Tree { root: TreeNode; }")

    @pytest.mark.parametrize(
        "annotation",
        ["() => void", "unknown", "[string, number]", "Map<string, number>", "Partial<User>"],
    )
    def test_unsupported(self, annotation):
        with pytest.raises(UnsupportedTypeError):
            extract(f"export class A {{ value: {annotation}; }}")


class TestImports:
    def test_relative_import(self, tmp_path: Path):
        models = tmp_path / "models"
        models.mkdir()
        (models / "address.ts").write_text("export interface Address { city: string }\n")
        (models / "user.ts").write_text(
            "import { Address } from './address.js';\n"
            "export class User { home: Address; }\n"
        )

        source = TypeScriptProject().load(models / "user.ts")
        parsed = ClassExtractor().extract(source.classes()[0])

        assert parsed.properties == (Property("home", ObjectType((Property("city", STRING),))),)

    def test_package_import_is_unsupported(self, tmp_path: Path):
        path = tmp_path / "user.ts"
        path.write_text("import { Address } from 'models';\nexport class User { home: Address; }\n")

        source = TypeScriptProject().load(path)
        with pytest.raises(UnsupportedTypeError):
            ClassExtractor().extract(source.classes()[0])

    def test_project_caches_sources(self, tmp_path: Path):
        path = tmp_path / "a.ts"
        path.write_text("export class A {}\n")
        project = TypeScriptProject()
        assert project.load(path) is project.load(str(path))
