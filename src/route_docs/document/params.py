"""Path-parameter extraction and merging."""

import re

from route_docs.registry.base import Parameter

PARAM_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def to_openapi_path(template: str) -> str:
    """Rewrite ``/users/:id`` as ``/users/{id}``."""
    return PARAM_RE.sub(r"{\1}", template)


def extract_path_params(template: str) -> list[Parameter]:
    """One required string path parameter per distinct placeholder, in order."""
    params: list[Parameter] = []
    seen: set[str] = set()
    for match in PARAM_RE.finditer(template):
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)
        params.append(Parameter(name=name, location="path", required=True, schema={"type": "string"}))
    return params


def merge_parameters(explicit: list[Parameter], inferred: list[Parameter]) -> list[Parameter]:
    """Explicit parameters first and untouched; inferred ones only fill gaps by name."""
    names = {param.name for param in explicit}
    return list(explicit) + [param for param in inferred if param.name not in names]
