"""Refinement checks -> JSON-Schema keywords.

Checks arrive in two shapes. Legacy trees carry flat records such as
``{"kind": "min", "value": 3, "inclusive": True}``; current trees carry
nested check nodes such as ``{"_zod": {"def": {"check": "min_length",
"minimum": 3}}}``. Both are normalized to a ``Check`` before being
applied, so string and number translation only deals with one vocabulary.
"""

import re
from typing import Any, NamedTuple

from .detect import field

STRING_FORMATS = {
    "email": "email",
    "url": "uri",
    "uuid": "uuid",
    "guid": "uuid",
    "cuid": "cuid",
}

INTEGER_FORMATS = {"int", "safeint", "int32", "uint32"}


class Check(NamedTuple):
    kind: str
    value: Any = None
    inclusive: bool = True


def normalize_check(raw: Any) -> Check | None:
    """Turn either check shape into a ``Check`` (None if unrecognised)."""
    kind = field(raw, "kind")
    if isinstance(kind, str):
        value = field(raw, "value")
        if kind == "regex":
            value = _pattern_source(field(raw, "regex") or value)
        return Check(kind, value, field(raw, "inclusive") is not False)

    definition = field(field(raw, "_zod"), "def")
    name = field(definition, "check")
    if not isinstance(name, str):
        return None

    if name == "min_length":
        return Check("min", field(definition, "minimum"))
    if name == "max_length":
        return Check("max", field(definition, "maximum"))
    if name == "length_equals":
        return Check("length", field(definition, "length"))
    if name == "greater_than":
        return Check("min", field(definition, "value"), field(definition, "inclusive") is not False)
    if name == "less_than":
        return Check("max", field(definition, "value"), field(definition, "inclusive") is not False)
    if name == "multiple_of":
        return Check("multipleOf", field(definition, "value"))
    if name == "number_format":
        return Check("int") if field(definition, "format") in INTEGER_FORMATS else None
    if name == "string_format":
        fmt = field(definition, "format")
        if fmt == "regex":
            return Check("regex", _pattern_source(field(definition, "pattern")))
        if fmt in STRING_FORMATS:
            return Check(fmt)
    return None


def apply_string_checks(schema: dict, checks: list) -> dict:
    for check in filter(None, map(normalize_check, checks or [])):
        if check.kind == "min":
            schema["minLength"] = check.value
        elif check.kind == "max":
            schema["maxLength"] = check.value
        elif check.kind == "length":
            schema["minLength"] = schema["maxLength"] = check.value
        elif check.kind in STRING_FORMATS:
            schema["format"] = STRING_FORMATS[check.kind]
        elif check.kind == "regex":
            schema["pattern"] = check.value
    return schema


def apply_number_checks(schema: dict, checks: list) -> dict:
    """Apply numeric bounds; ``inclusive: False`` adds the exclusive flag."""
    for check in filter(None, map(normalize_check, checks or [])):
        if check.kind == "min":
            schema["minimum"] = check.value
            if not check.inclusive:
                schema["exclusiveMinimum"] = True
        elif check.kind == "max":
            schema["maximum"] = check.value
            if not check.inclusive:
                schema["exclusiveMaximum"] = True
        elif check.kind == "int":
            schema["type"] = "integer"
        elif check.kind == "multipleOf":
            schema["multipleOf"] = check.value
    return schema


def _pattern_source(pattern: Any) -> str:
    if isinstance(pattern, re.Pattern):
        return pattern.pattern
    source = field(pattern, "source")
    if isinstance(source, str):
        return source
    return str(pattern)
