"""Render an assembled document as JSON or YAML text."""

import json
from pathlib import Path

import yaml

FORMATS = ("json", "yaml")


def detect_output_format(file_path: Path) -> str:
    """Pick 'yaml' for .yaml/.yml outputs, 'json' otherwise."""
    return "yaml" if file_path.suffix.lower() in (".yaml", ".yml") else "json"


def dump_document(document: dict, fmt: str = "json") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"Unsupported document format: {fmt!r} (expected one of {', '.join(FORMATS)})")
