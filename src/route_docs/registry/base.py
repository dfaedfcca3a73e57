"""Data models for registered routes.

Router glue converts each route registration into a ``RouteRecord``;
the registry and the document assembler only ever see these models.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RESPONSES = {"200": {"description": "Successful response"}}


class ValidatorTarget(str, Enum):
    BODY_JSON = "body-json"
    BODY_FORM = "body-form"
    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"

    @classmethod
    def parse(cls, value: "str | ValidatorTarget") -> "ValidatorTarget":
        """Accept the canonical names plus the short router aliases."""
        aliases = {"json": cls.BODY_JSON, "form": cls.BODY_FORM, "param": cls.PATH}
        if isinstance(value, str) and value in aliases:
            return aliases[value]
        return cls(value)

    @property
    def location(self) -> str | None:
        """Parameter location for non-body targets."""
        if self in (ValidatorTarget.BODY_JSON, ValidatorTarget.BODY_FORM):
            return None
        return self.value


class ValidatorAttachment(BaseModel):
    """A raw schema tree recorded against one part of the request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: ValidatorTarget
    schema_: Any = Field(alias="schema")

    def __init__(self, target: "str | ValidatorTarget", schema: Any, **data: Any):
        super().__init__(target=ValidatorTarget.parse(target), schema=schema, **data)


class Parameter(BaseModel):
    """One OpenAPI parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    location: str = Field(alias="in")  # query / path / header / cookie
    required: bool = False
    description: str | None = None
    schema_: dict | None = Field(default=None, alias="schema")

    def to_openapi(self) -> dict:
        param: dict[str, Any] = {"name": self.name, "in": self.location, "required": self.required}
        if self.description is not None:
            param["description"] = self.description
        if self.schema_ is not None:
            param["schema"] = self.schema_
        param.update(self.model_extra or {})
        return param


class DocOptions(BaseModel):
    """Per-route (or per-mount) documentation metadata."""

    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    deprecated: bool | None = None
    security: list[dict[str, list[str]]] | None = None
    parameters: list[Parameter] | None = None
    request_body: dict | None = None
    responses: dict[str, dict] | None = None

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(status): response for status, response in value.items()}
        return value

    def declared(self) -> dict[str, Any]:
        """Fields that were given a value, keyed by field name."""
        return {name: getattr(self, name) for name in type(self).model_fields if getattr(self, name) is not None}


class RouteRecord(BaseModel):
    """Everything declared for one registered route."""

    model_config = ConfigDict(frozen=True)

    method: str  # get / post / put / patch / delete
    path: str  # /users/:id
    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    deprecated: bool | None = None
    security: list[dict[str, list[str]]] | None = None
    parameters: list[Parameter] | None = None
    request_body: dict | None = None
    responses: dict[str, dict] = Field(default_factory=lambda: dict(DEFAULT_RESPONSES))
    validators: tuple[ValidatorAttachment, ...] = ()

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("responses", mode="before")
    @classmethod
    def _default_responses(cls, value: Any) -> Any:
        if not value:
            return dict(DEFAULT_RESPONSES)
        if isinstance(value, dict):
            return {str(status): response for status, response in value.items()}
        return value

    @classmethod
    def from_options(
        cls,
        method: str,
        path: str,
        options: DocOptions | None = None,
        validators: tuple[ValidatorAttachment, ...] = (),
    ) -> "RouteRecord":
        options = options or DocOptions()
        return cls(
            method=method,
            path=path,
            validators=validators,
            **options.declared(),
        )
