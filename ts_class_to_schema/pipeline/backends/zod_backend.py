"""
Zod backend.

Zod differs from TypeBox in three places: optional members take a trailing
``.optional()``, intersections are a binary combinator, and ``z.enum`` only
accepts strings. Template literal types have no Zod counterpart and fall back
to ``z.string()``.

@see https://zod.dev/
"""

from __future__ import annotations

from ..analyzer.ir_nodes import PrimitiveKind
from .base import Dialect

ZOD = Dialect(
    name="zod",
    imports=('import { z } from "zod"',),
    primitives={
        PrimitiveKind.STRING: "z.string()",
        PrimitiveKind.NUMBER: "z.number()",
        PrimitiveKind.BOOLEAN: "z.boolean()",
        PrimitiveKind.DATE: "z.date()",
        PrimitiveKind.NULL: "z.null()",
        PrimitiveKind.UNDEFINED: "z.undefined()",
        PrimitiveKind.ANY: "z.any()",
    },
    object="z.object",
    array="z.array({})",
    optional="{}.optional()",
    union="z.union([{}])",
    literal="z.literal({})",
    record="z.record({}, {})",
    intersection="z.intersection({}, {})",
    binary_intersection=True,
    enum="z.enum([{}])",
    enum_value_types=frozenset({"string"}),
    never="z.never()",
)
