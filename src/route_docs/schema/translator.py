"""Schema tree -> normalized JSON-Schema translation.

A ``SchemaTranslator`` converts a raw validation-schema tree (legacy or
current encoding) into a plain JSON-Schema-like dict. Each node kind has
one handler; both encodings dispatch to the same handler and only differ
in where a handler reads its fields from.

Results are memoized by node identity. A node that is reached again
while it is still being translated (a self-referencing declaration)
resolves to an unconstrained object instead of recursing forever. Results
that hold such a stand-in are not cached, so every node of a cycle reads
the same no matter which one a walk starts from.
"""

import copy
import logging
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable

from .checks import INTEGER_FORMATS, STRING_FORMATS, apply_number_checks, apply_string_checks
from .detect import OPTIONAL_KINDS, Encoding, NodeKind, classify, field, is_tree, kind_of

logger = logging.getLogger(__name__)

UNCONSTRAINED_OBJECT: dict = {"type": "object"}
NO_CYCLE = float("inf")

LITERAL_TYPES = [
    (bool, "boolean"),
    (int, "integer"),
    (float, "number"),
    (str, "string"),
    (type(None), "null"),
]


class SchemaTranslator:
    """Translates schema trees, caching results per node identity."""

    def __init__(self):
        # id(node) -> (node, result); holding the node keeps its id from being reused
        self._cache: dict[int, tuple[Any, dict | None]] = {}
        self._local = threading.local()
        self._handlers: dict[NodeKind, Callable[[Any, Encoding, Any], dict]] = {
            NodeKind.STRING: self._string,
            NodeKind.NUMBER: self._number,
            NodeKind.BOOLEAN: lambda node, enc, d: {"type": "boolean"},
            NodeKind.BIGINT: lambda node, enc, d: {"type": "integer", "format": "int64"},
            NodeKind.DATE: lambda node, enc, d: {"type": "string", "format": "date-time"},
            NodeKind.OBJECT: self._object,
            NodeKind.ARRAY: self._array,
            NodeKind.OPTIONAL: self._unwrap,
            NodeKind.DEFAULT: self._unwrap,
            NodeKind.NULLABLE: self._nullable,
            NodeKind.ENUM: self._enum,
            NodeKind.NATIVE_ENUM: self._enum,
            NodeKind.LITERAL: self._literal,
            NodeKind.UNION: self._union,
            NodeKind.DISCRIMINATED_UNION: self._union,
            NodeKind.INTERSECTION: self._intersection,
            NodeKind.RECORD: self._record,
            NodeKind.TUPLE: self._tuple,
            NodeKind.EFFECTS: lambda node, enc, d: self._child(field(d, "schema")),
            NodeKind.LAZY: self._lazy,
            NodeKind.PIPELINE: lambda node, enc, d: self._child(field(d, "in")),
            NodeKind.ANY: lambda node, enc, d: {},
            NodeKind.UNRECOGNIZED: lambda node, enc, d: dict(UNCONSTRAINED_OBJECT),
        }

    def __len__(self) -> int:
        return len(self._cache)

    def translate(self, node: Any) -> dict | None:
        """Translate ``node``; None when it is not a recognisable schema tree.

        Never raises. Errors from user callables inside the tree (such as a
        lazy getter) are logged and the node degrades to absent. The result
        is a fresh copy; editing it does not touch the cache.
        """
        try:
            return copy.deepcopy(self._translate(node))
        except Exception:
            logger.warning("Schema translation failed for %r", type(node).__name__, exc_info=True)
            return self._install(node, None)

    # -- memo / cycle guard ---------------------------------------------------

    def _translate(self, node: Any) -> dict | None:
        if not is_tree(node):
            return None

        key = id(node)
        cached = self._cache.get(key)
        if cached is not None and cached[0] is node:
            return cached[1]

        detected = classify(node)
        if detected is None:
            return self._install(node, None)

        encoding, kind, definition = detected
        if encoding is Encoding.PLAIN:
            return self._install(node, node)

        state = self._state()
        open_depth = state.open.get(key)
        if open_depth is not None:
            logger.debug("Cyclic schema reference on %s node", kind.value)
            state.floor = min(state.floor, open_depth)
            return dict(UNCONSTRAINED_OBJECT)

        depth = len(state.open)
        state.open[key] = depth
        outer_floor, state.floor = state.floor, NO_CYCLE
        try:
            result = self._handlers[kind](node, encoding, definition)
        finally:
            del state.open[key]
            floor = state.floor
            state.floor = min(outer_floor, floor) if floor < depth else outer_floor

        # A result holding a cycle stand-in depends on where the walk started.
        if floor <= depth:
            return result
        return self._install(node, result)

    def _install(self, node: Any, result: dict | None) -> dict | None:
        # First writer wins; concurrent writers computed an equal value.
        return self._cache.setdefault(id(node), (node, result))[1]

    def _state(self) -> threading.local:
        # open: id(node) -> walk depth; floor: shallowest open node re-entered
        if not hasattr(self._local, "open"):
            self._local.open = {}
            self._local.floor = NO_CYCLE
        return self._local

    def _child(self, node: Any) -> dict:
        """Translate a nested node; unrecognised children become objects."""
        if node is None:
            return dict(UNCONSTRAINED_OBJECT)
        result = self._translate(node)
        return result if result is not None else dict(UNCONSTRAINED_OBJECT)

    # -- leaves ---------------------------------------------------------------

    def _string(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        schema = {"type": "string"}
        fmt = field(definition, "format")
        if encoding is Encoding.CURRENT and fmt in STRING_FORMATS:
            schema["format"] = STRING_FORMATS[fmt]
        return apply_string_checks(schema, field(definition, "checks"))

    def _number(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        schema = {"type": "number"}
        if encoding is Encoding.CURRENT and field(definition, "format") in INTEGER_FORMATS:
            schema["type"] = "integer"
        return apply_number_checks(schema, field(definition, "checks"))

    def _enum(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        values = field(definition, "entries")
        if values is None:
            values = field(definition, "values")
        return {"type": "string", "enum": _string_members(values)}

    def _literal(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        values = field(definition, "values")
        if values is None or isinstance(values, (str, bytes)):
            values = [field(definition, "value")]
        values = list(values)
        return {"type": _literal_type(values[0] if values else None), "enum": values}

    # -- containers -----------------------------------------------------------

    def _object(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        shape = field(definition, "shape")
        if shape is None and encoding is Encoding.CURRENT:
            shape = field(node, "shape")
        if callable(shape) and not isinstance(shape, Mapping):
            shape = shape()
        if not isinstance(shape, Mapping):
            return dict(UNCONSTRAINED_OBJECT)

        properties: dict[str, dict] = {}
        required: list[str] = []
        for name, child in shape.items():
            properties[name] = self._child(child)
            if kind_of(child) not in OPTIONAL_KINDS:
                required.append(name)

        schema: dict = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def _array(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        element = field(definition, "type" if encoding is Encoding.LEGACY else "element")
        schema: dict = {"type": "array", "items": self._child(element) if element is not None else {}}
        min_items = field(definition, "minLength")
        max_items = field(definition, "maxLength")
        if encoding is Encoding.LEGACY:
            min_items = field(min_items, "value")
            max_items = field(max_items, "value")
        if min_items is not None:
            schema["minItems"] = min_items
        if max_items is not None:
            schema["maxItems"] = max_items
        return schema

    def _tuple(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        items = [self._child(item) for item in field(definition, "items") or []]
        return {"type": "array", "items": items, "minItems": len(items), "maxItems": len(items)}

    def _record(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        value_type = field(definition, "valueType")
        return {
            "type": "object",
            "additionalProperties": self._child(value_type) if value_type is not None else {},
        }

    # -- wrappers / combinators -----------------------------------------------

    def _unwrap(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        inner = field(definition, "innerType")
        return self._child(inner) if inner is not None else {}

    def _nullable(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        inner = field(definition, "innerType")
        base = self._child(inner) if inner is not None else {}
        return {**base, "nullable": True}

    def _union(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        options = field(definition, "options") or []
        if isinstance(options, Mapping):
            options = options.values()
        schema: dict = {}
        discriminator = field(definition, "discriminator")
        if isinstance(discriminator, str):
            schema["discriminator"] = {"propertyName": discriminator}
        schema["oneOf"] = [self._child(option) for option in options]
        return schema

    def _intersection(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        return {"allOf": [self._child(field(definition, "left")), self._child(field(definition, "right"))]}

    def _lazy(self, node: Any, encoding: Encoding, definition: Any) -> dict:
        getter = field(definition, "getter")
        if not callable(getter):
            return dict(UNCONSTRAINED_OBJECT)
        try:
            target = getter()
        except Exception:
            logger.warning("Lazy schema getter failed", exc_info=True)
            return dict(UNCONSTRAINED_OBJECT)
        return self._child(target)


def _string_members(values: Any) -> list:
    if isinstance(values, type) and issubclass(values, Enum):
        values = [member.value for member in values]
    elif isinstance(values, Mapping):
        values = list(values.values())
    members: list = []
    for value in values or []:
        if isinstance(value, str) and value not in members:
            members.append(value)
    return members


def _literal_type(value: Any) -> str:
    for python_type, name in LITERAL_TYPES:
        if isinstance(value, python_type):
            return name
    return "object"


_default_translator = SchemaTranslator()


def translate(node: Any) -> dict | None:
    """Translate with the process-wide translator."""
    return _default_translator.translate(node)
