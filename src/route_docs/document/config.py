"""Top-level document settings."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict


class Server(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str
    description: str | None = None


class SpecConfig(BaseModel):
    """Metadata and composition options for one generated document."""

    title: str
    version: str
    description: str | None = None
    prefix: str = ""  # prepended to every route path
    servers: list[Server] | None = None
    components: dict[str, Any] | None = None
    security: list[dict[str, list[str]]] | None = None


def load_config(file_path: Path, **overrides: Any) -> SpecConfig:
    """Load a SpecConfig from a YAML or JSON file.

    Keyword overrides that are not None replace values from the file.
    """
    data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: expected a mapping at the top level, got {type(data).__name__}")

    data.update({key: value for key, value in overrides.items() if value is not None})
    return SpecConfig(**data)
