"""Document assembly.

Walks a route registry once and produces an OpenAPI 3.1 document as a
plain JSON-serializable dict. The assembler keeps no state beyond its
schema translator's memo cache, and never mutates its inputs.
"""

import copy
import logging
from collections.abc import Mapping

from route_docs.document.config import SpecConfig
from route_docs.document.params import extract_path_params, merge_parameters, to_openapi_path
from route_docs.registry.base import Parameter, RouteRecord, ValidatorAttachment, ValidatorTarget
from route_docs.registry.registry import RouteRegistry
from route_docs.schema.translator import SchemaTranslator

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.1.0"

BODY_CONTENT_TYPES = {
    ValidatorTarget.BODY_JSON: "application/json",
    ValidatorTarget.BODY_FORM: "multipart/form-data",
}

VALIDATION_ERROR_RESPONSE = {
    "description": "Validation error",
    "content": {
        "application/json": {
            "schema": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean"},
                    "errors": {"type": "array", "items": {}},
                },
                "required": ["success", "errors"],
            }
        }
    },
}


class Assembler:
    """Builds documents; one translator is shared across calls."""

    def __init__(self, translator: SchemaTranslator | None = None):
        self.translator = translator or SchemaTranslator()

    def assemble(self, registry: RouteRegistry, config: SpecConfig) -> dict:
        paths: dict[str, dict] = {}
        for record in registry.records:
            raw_path = config.prefix + record.path
            # Last registration for a (path, method) pair wins.
            paths.setdefault(to_openapi_path(raw_path), {})[record.method] = self._operation(record, raw_path)

        info: dict = {"title": config.title, "version": config.version}
        if config.description:
            info["description"] = config.description

        document: dict = {"openapi": OPENAPI_VERSION, "info": info, "paths": paths}
        if config.servers is not None:
            document["servers"] = [server.model_dump(exclude_none=True) for server in config.servers]
        if config.components is not None:
            document["components"] = config.components
        if config.security is not None:
            document["security"] = config.security

        logger.debug("Assembled %d paths from %d routes", len(paths), len(registry))
        return copy.deepcopy(document)

    def _operation(self, record: RouteRecord, raw_path: str) -> dict:
        operation: dict = {}
        if record.tags:
            operation["tags"] = record.tags
        if record.summary:
            operation["summary"] = record.summary
        if record.description:
            operation["description"] = record.description
        if record.deprecated:
            operation["deprecated"] = record.deprecated
        if record.security is not None:
            operation["security"] = record.security

        request_body = record.request_body
        explicit = record.parameters
        if record.validators:
            if request_body is None:
                request_body = self._body_from_validators(record.validators)
            if explicit is None:
                explicit = self._params_from_validators(record.validators)

        parameters = merge_parameters(explicit or [], extract_path_params(raw_path))
        if parameters:
            operation["parameters"] = [param.to_openapi() for param in parameters]
        if request_body is not None:
            operation["requestBody"] = request_body

        responses = dict(record.responses)
        if record.validators and "400" not in responses:
            responses["400"] = VALIDATION_ERROR_RESPONSE
        operation["responses"] = responses
        return operation

    def _body_from_validators(self, validators: tuple[ValidatorAttachment, ...]) -> dict | None:
        for target in (ValidatorTarget.BODY_JSON, ValidatorTarget.BODY_FORM):
            attachment = next((v for v in validators if v.target is target), None)
            if attachment is None:
                continue
            schema = self.translator.translate(attachment.schema_)
            if not isinstance(schema, Mapping):
                return None
            return {
                "required": bool(schema.get("required")),
                "content": {BODY_CONTENT_TYPES[target]: {"schema": schema}},
            }
        return None

    def _params_from_validators(self, validators: tuple[ValidatorAttachment, ...]) -> list[Parameter]:
        params: list[Parameter] = []
        for attachment in validators:
            location = attachment.target.location
            if location is None:
                continue
            schema = self.translator.translate(attachment.schema_)
            if not isinstance(schema, Mapping) or schema.get("type") != "object":
                continue
            required = set(schema.get("required") or [])
            for name, field_schema in (schema.get("properties") or {}).items():
                params.append(
                    Parameter(
                        name=name,
                        location=location,
                        required=location == "path" or name in required,
                        schema=field_schema,
                    )
                )
        return params


_default_assembler = Assembler()


def assemble(registry: RouteRegistry, config: SpecConfig) -> dict:
    """Assemble with the process-wide assembler."""
    return _default_assembler.assemble(registry, config)
