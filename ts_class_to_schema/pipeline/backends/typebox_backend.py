"""
TypeBox backends.

Elysia re-exports TypeBox as ``t``; the standalone package exposes it as
``Type``, imported under the same alias so both targets share one table.

@see https://sinclairzx81.github.io/typebox/
@see https://elysiajs.com/essential/validation.html
"""

from __future__ import annotations

from dataclasses import replace

from ..analyzer.ir_nodes import PrimitiveKind
from .base import Dialect

ELYSIA = Dialect(
    name="elysia",
    imports=('import { t } from "elysia"',),
    primitives={
        PrimitiveKind.STRING: "t.String()",
        PrimitiveKind.NUMBER: "t.Number()",
        PrimitiveKind.BOOLEAN: "t.Boolean()",
        PrimitiveKind.DATE: "t.Date()",
        PrimitiveKind.NULL: "t.Null()",
        PrimitiveKind.UNDEFINED: "t.Undefined()",
        PrimitiveKind.ANY: "t.Any()",
    },
    object="t.Object",
    array="t.Array({})",
    optional="t.Optional({})",
    union="t.Union([{}])",
    literal="t.Literal({})",
    record="t.Record({}, {})",
    intersection="t.Intersect([{}])",
    enum="t.UnionEnum([{}])",
    enum_value_types=frozenset({"string", "number"}),
    template_literal="t.TemplateLiteral([{}])",
    never="t.Never()",
)

TYPEBOX = replace(
    ELYSIA,
    name="typebox",
    imports=('import { Type as t } from "@sinclair/typebox"',),
)
