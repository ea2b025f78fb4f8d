"""
Tests for schema rendering in every backend.
"""

from dataclasses import replace

import pytest

from ts_class_to_schema.pipeline.analyzer import (
    ArrayType,
    IntersectionType,
    LiteralType,
    ObjectType,
    ParsedClass,
    PrimitiveKind,
    PrimitiveType,
    Property,
    RecordType,
    TemplateLiteralType,
    UnionType,
)
from ts_class_to_schema.pipeline.analyzer.ir_nodes import BOOLEAN, DATE, NEVER, NULL, NUMBER, STRING
from ts_class_to_schema.pipeline.backends import DIALECTS, Dialect, SchemaBackend, available_backends, get_backend
from ts_class_to_schema.pipeline.backends.zod_backend import ZOD
from ts_class_to_schema.pipeline.errors import MissingBackendCapabilityError, UnknownBackendError

USER = ParsedClass(
    "User",
    source_location="user.ts:1",
    properties=(
        Property("id", STRING),
        Property("age", NUMBER, is_optional=True),
    ),
)


@pytest.fixture
def elysia():
    return get_backend("elysia")


@pytest.fixture
def zod():
    return get_backend("zod")


class TestRegistry:
    def test_available_backends(self):
        assert available_backends() == ["elysia", "typebox", "zod"]

    def test_unknown_backend(self):
        with pytest.raises(UnknownBackendError) as exc_info:
            get_backend("yup")
        assert str(exc_info.value) == "Unsupported generator: 'yup'. Must be one of: elysia, typebox, zod"

    def test_supports(self, elysia):
        assert elysia.supports("elysia")
        assert not elysia.supports("zod")

    @pytest.mark.parametrize("name", sorted(DIALECTS))
    def test_every_dialect_renders_every_primitive(self, name):
        backend = get_backend(name)
        for kind in PrimitiveKind:
            assert backend.render(PrimitiveType(kind))

    def test_dialect_requires_all_primitives(self):
        with pytest.raises(ValueError):
            Dialect(
                name="partial",
                imports=(),
                primitives={PrimitiveKind.STRING: "s()"},
                object="o",
                array="a({})",
                optional="{}?",
                union="u({})",
                literal="l({})",
                record="r({}, {})",
                intersection="i({})",
            )


class TestGenerate:
    def test_elysia_user(self, elysia):
        assert elysia.generate(USER) == (
            'import { t } from "elysia"\n'
            "\n"
            "export const userSchema = t.Object({ \n"
            "  id: t.String(),\n"
            "  age: t.Optional(t.Number()) });"
        )

    def test_typebox_user(self):
        code = get_backend("typebox").generate(USER)
        assert code.startswith('import { Type as t } from "@sinclair/typebox"\n\n')
        assert "age: t.Optional(t.Number())" in code

    def test_zod_user(self, zod):
        assert zod.generate(USER) == (
            'import { z } from "zod"\n'
            "\n"
            "export const userSchema = z.object({ \n"
            "  id: z.string(),\n"
            "  age: z.number().optional() });"
        )

    def test_schema_identifier(self, elysia):
        assert elysia.schema_identifier("User") == "userSchema"
        assert elysia.schema_identifier("OrderItem") == "orderItemSchema"

    def test_empty_class(self, zod):
        assert zod.render_declaration(ParsedClass("Empty")) == "export const emptySchema = z.object({ \n });"

    def test_module_with_several_classes(self, elysia):
        code = elysia.render_module([USER, ParsedClass("Tag", properties=(Property("label", STRING),))])
        assert code.count('import { t } from "elysia"') == 1
        assert code.endswith(
            "t.Optional(t.Number()) });\n\nexport const tagSchema = t.Object({ \n  label: t.String() });"
        )

    def test_quoted_property_name(self, elysia):
        parsed = ParsedClass("Headers", properties=(Property("content-type", STRING),))
        assert "  'content-type': t.String()" in elysia.render_declaration(parsed)

    def test_failure_leaves_no_output(self):
        backend = SchemaBackend(replace(ZOD, never=None))
        parsed = ParsedClass("Gone", properties=(Property("value", NEVER),))
        with pytest.raises(MissingBackendCapabilityError) as exc_info:
            backend.generate(parsed)
        assert exc_info.value.variant == "never"


class TestRender:
    def test_array(self, elysia, zod):
        assert elysia.render(ArrayType(STRING)) == "t.Array(t.String())"
        assert zod.render(ArrayType(DATE)) == "z.array(z.date())"

    def test_nested_object(self, elysia):
        nested = ObjectType((Property("x", NUMBER), Property("y", NUMBER, is_optional=True)))
        assert elysia.render(nested) == "t.Object({\n  x: t.Number(),\n  y: t.Optional(t.Number())\n})"

    def test_record(self, elysia, zod):
        assert elysia.render(RecordType(STRING, BOOLEAN)) == "t.Record(t.String(), t.Boolean())"
        assert zod.render(RecordType(NUMBER, STRING)) == "z.record(z.number(), z.string())"

    def test_literals(self, elysia):
        assert elysia.render(LiteralType("admin")) == "t.Literal('admin')"
        assert elysia.render(LiteralType(3)) == "t.Literal(3)"
        assert elysia.render(LiteralType(1.0)) == "t.Literal(1)"
        assert elysia.render(LiteralType(1.5)) == "t.Literal(1.5)"
        assert elysia.render(LiteralType(-2)) == "t.Literal(-2)"
        assert elysia.render(LiteralType(True)) == "t.Literal(true)"

    def test_union(self, elysia, zod):
        assert elysia.render(UnionType((STRING, NULL))) == "t.Union([t.String(), t.Null()])"
        assert zod.render(UnionType((STRING, NULL))) == "z.union([z.string(), z.null()])"

    def test_string_literal_union_is_an_enum(self, elysia, zod):
        union = UnionType((LiteralType("a"), LiteralType("b")))
        assert elysia.render(union) == "t.UnionEnum(['a', 'b'])"
        assert zod.render(union) == "z.enum(['a', 'b'])"

    def test_number_literal_union(self, elysia, zod):
        union = UnionType((LiteralType(1), LiteralType(2)))
        assert elysia.render(union) == "t.UnionEnum([1, 2])"
        assert zod.render(union) == "z.union([z.literal(1), z.literal(2)])"

    def test_mixed_literal_union_is_not_an_enum(self, elysia):
        union = UnionType((LiteralType("a"), LiteralType(1)))
        assert elysia.render(union) == "t.Union([t.Literal('a'), t.Literal(1)])"

    def test_boolean_literal_union_is_not_an_enum(self, elysia):
        union = UnionType((LiteralType(True), LiteralType(False)))
        assert elysia.render(union) == "t.Union([t.Literal(true), t.Literal(false)])"

    def test_intersection(self, elysia, zod):
        members = (
            ObjectType((Property("a", STRING),)),
            ObjectType((Property("b", NUMBER),)),
            ObjectType((Property("c", BOOLEAN),)),
        )
        assert elysia.render(IntersectionType(members)) == (
            "t.Intersect([t.Object({\n  a: t.String()\n}), t.Object({\n  b: t.Number()\n}), t.Object({\n  c: t.Boolean()\n})])"
        )
        assert zod.render(IntersectionType(members)) == (
            "z.intersection(z.intersection(z.object({\n  a: z.string()\n}), z.object({\n  b: z.number()\n})), "
            "z.object({\n  c: z.boolean()\n}))"
        )

    def test_binary_intersection_of_two_members(self, zod):
        members = (ObjectType((Property("a", STRING),)), ObjectType((Property("b", NUMBER),)))
        assert zod.render(IntersectionType(members)) == (
            "z.intersection(z.object({\n  a: z.string()\n}), z.object({\n  b: z.number()\n}))"
        )

    def test_single_member_intersection(self, elysia, zod):
        assert zod.render(IntersectionType((STRING,))) == "z.string()"
        assert elysia.render(IntersectionType((STRING,))) == "t.Intersect([t.String()])"

    def test_template_literal(self, elysia, zod):
        template = TemplateLiteralType((LiteralType("id-"), NUMBER))
        assert elysia.render(template) == "t.TemplateLiteral([t.Literal('id-'), t.Number()])"
        assert zod.render(template) == "z.string()"

    def test_never(self, elysia, zod):
        assert elysia.render(NEVER) == "t.Never()"
        assert zod.render(NEVER) == "z.never()"
