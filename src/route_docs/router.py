"""Route registration glue.

``Router`` is the thin layer a web framework integration calls into: it
turns each route declaration into a ``RouteRecord`` on its own registry
and remembers the handler so the host framework can bind it. Mounting a
sub-router copies its records into the parent registry under a prefix.
"""

import logging
from typing import Any, Callable

from route_docs.document.assembler import Assembler, assemble
from route_docs.document.config import SpecConfig
from route_docs.registry.base import DocOptions, RouteRecord, ValidatorAttachment, ValidatorTarget
from route_docs.registry.registry import RouteRegistry

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


def validator(target: str | ValidatorTarget, schema: Any) -> ValidatorAttachment:
    """Attach a request schema tree to one part of the request.

    ``target`` is one of body-json, body-form, query, path, header,
    cookie (or the aliases json, form, param).
    """
    return ValidatorAttachment(target, schema)


class DocumentEndpoint:
    """Assembles the document on first call and serves the cached copy after."""

    def __init__(self, registry: RouteRegistry, config: SpecConfig, assembler: Assembler | None = None):
        self.registry = registry
        self.config = config
        self._assembler = assembler
        self._document: dict | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> dict:
        if self._document is None:
            if self._assembler is not None:
                document = self._assembler.assemble(self.registry, self.config)
            else:
                document = assemble(self.registry, self.config)
            # A concurrent first call may install an equal document first.
            if self._document is None:
                self._document = document
        return self._document


class Router:
    """Collects route declarations into an explicitly owned registry."""

    def __init__(self):
        self.registry = RouteRegistry()
        self.routes: list[tuple[str, str, Handler | None]] = []

    def add_route(
        self,
        method: str,
        path: str,
        *validators: ValidatorAttachment,
        handler: Handler | None = None,
        **options: Any,
    ) -> RouteRecord:
        record = RouteRecord.from_options(method, path, DocOptions(**options), tuple(validators))
        self.registry.add(record)
        self.routes.append((record.method, path, handler))
        logger.debug("Registered %s %s", record.method.upper(), path)
        return record

    def _method(self, method: str, path: str, validators: tuple, handler: Handler | None, options: dict):
        if handler is not None:
            self.add_route(method, path, *validators, handler=handler, **options)
            return self

        def decorator(func: Handler) -> Handler:
            self.add_route(method, path, *validators, handler=func, **options)
            return func

        return decorator

    def get(self, path: str, *validators: ValidatorAttachment, handler: Handler | None = None, **options: Any):
        return self._method("get", path, validators, handler, options)

    def post(self, path: str, *validators: ValidatorAttachment, handler: Handler | None = None, **options: Any):
        return self._method("post", path, validators, handler, options)

    def put(self, path: str, *validators: ValidatorAttachment, handler: Handler | None = None, **options: Any):
        return self._method("put", path, validators, handler, options)

    def patch(self, path: str, *validators: ValidatorAttachment, handler: Handler | None = None, **options: Any):
        return self._method("patch", path, validators, handler, options)

    def delete(self, path: str, *validators: ValidatorAttachment, handler: Handler | None = None, **options: Any):
        return self._method("delete", path, validators, handler, options)

    def route(self, prefix: str, sub_router: "Router", **options: Any) -> "Router":
        """Mount ``sub_router`` at ``prefix``; ``options`` are inherited defaults."""
        defaults = DocOptions(**options) if options else None
        self.registry.merge_from(prefix, sub_router.registry, defaults)
        for method, path, handler in sub_router.routes:
            self.routes.append((method, prefix + ("" if path == "/" else path), handler))
        return self

    def doc(self, config: SpecConfig | dict, assembler: Assembler | None = None) -> DocumentEndpoint:
        if isinstance(config, dict):
            config = SpecConfig(**config)
        return DocumentEndpoint(self.registry, config, assembler)

