"""Detect which encoding a raw schema tree node uses.

Two historical encodings of the same validation library are recognised,
plus already-normalized JSON-Schema objects which pass through as-is.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


class Encoding(str, Enum):
    LEGACY = "legacy"  # node._def.typeName == "ZodString"
    CURRENT = "current"  # node._zod.def.type == "string"
    PLAIN = "plain"  # {"type": "string", ...}


class NodeKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"
    OPTIONAL = "optional"
    DEFAULT = "default"
    NULLABLE = "nullable"
    ENUM = "enum"
    NATIVE_ENUM = "native_enum"
    LITERAL = "literal"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    INTERSECTION = "intersection"
    RECORD = "record"
    TUPLE = "tuple"
    EFFECTS = "effects"
    LAZY = "lazy"
    PIPELINE = "pipeline"
    ANY = "any"
    UNRECOGNIZED = "unrecognized"


LEGACY_KINDS = {
    "ZodString": NodeKind.STRING,
    "ZodNumber": NodeKind.NUMBER,
    "ZodBoolean": NodeKind.BOOLEAN,
    "ZodBigInt": NodeKind.BIGINT,
    "ZodDate": NodeKind.DATE,
    "ZodObject": NodeKind.OBJECT,
    "ZodArray": NodeKind.ARRAY,
    "ZodOptional": NodeKind.OPTIONAL,
    "ZodDefault": NodeKind.DEFAULT,
    "ZodNullable": NodeKind.NULLABLE,
    "ZodEnum": NodeKind.ENUM,
    "ZodNativeEnum": NodeKind.NATIVE_ENUM,
    "ZodLiteral": NodeKind.LITERAL,
    "ZodUnion": NodeKind.UNION,
    "ZodDiscriminatedUnion": NodeKind.DISCRIMINATED_UNION,
    "ZodIntersection": NodeKind.INTERSECTION,
    "ZodRecord": NodeKind.RECORD,
    "ZodTuple": NodeKind.TUPLE,
    "ZodEffects": NodeKind.EFFECTS,
    "ZodLazy": NodeKind.LAZY,
    "ZodPipeline": NodeKind.PIPELINE,
    "ZodAny": NodeKind.ANY,
    "ZodUnknown": NodeKind.ANY,
    "ZodVoid": NodeKind.ANY,
}

CURRENT_KINDS = {
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "boolean": NodeKind.BOOLEAN,
    "bigint": NodeKind.BIGINT,
    "date": NodeKind.DATE,
    "object": NodeKind.OBJECT,
    "array": NodeKind.ARRAY,
    "optional": NodeKind.OPTIONAL,
    "default": NodeKind.DEFAULT,
    "nullable": NodeKind.NULLABLE,
    "enum": NodeKind.ENUM,
    "literal": NodeKind.LITERAL,
    "union": NodeKind.UNION,
    "intersection": NodeKind.INTERSECTION,
    "record": NodeKind.RECORD,
    "tuple": NodeKind.TUPLE,
    "lazy": NodeKind.LAZY,
    "pipe": NodeKind.PIPELINE,
    "any": NodeKind.ANY,
    "unknown": NodeKind.ANY,
    "void": NodeKind.ANY,
}

# Wrapper kinds that make a field optional inside a parent object.
OPTIONAL_KINDS = frozenset({NodeKind.OPTIONAL, NodeKind.DEFAULT})


def field(node: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an object attribute."""
    if node is None:
        return None
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def is_tree(node: Any) -> bool:
    """Scalars and ``None`` are never schema trees."""
    return node is not None and not isinstance(node, (str, bytes, int, float, bool))


def classify(node: Any) -> tuple[Encoding, NodeKind, Any] | None:
    """Classify a node as ``(encoding, kind, definition)``.

    Returns None when the node matches neither encoding nor looks like a
    plain schema object.
    """
    if not is_tree(node):
        return None

    legacy_def = field(node, "_def")
    current = field(node, "_zod")

    if current is not None:
        current_def = field(current, "def")
        type_name = field(current_def, "type")
        if isinstance(type_name, str):
            kind = CURRENT_KINDS.get(type_name, NodeKind.UNRECOGNIZED)
            return Encoding.CURRENT, kind, current_def

    if legacy_def is not None:
        type_name = field(legacy_def, "typeName")
        if isinstance(type_name, str):
            kind = LEGACY_KINDS.get(type_name, NodeKind.UNRECOGNIZED)
            return Encoding.LEGACY, kind, legacy_def

    if legacy_def is None and current is None and isinstance(node, Mapping) and isinstance(field(node, "type"), str):
        return Encoding.PLAIN, NodeKind.UNRECOGNIZED, node

    return None


def kind_of(node: Any) -> NodeKind | None:
    """Return the node kind without the encoding details."""
    detected = classify(node)
    return detected[1] if detected else None
