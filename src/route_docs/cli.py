"""CLI entry point for route-docs."""

import importlib
import logging
import sys
from pathlib import Path

import click

from route_docs.document.assembler import assemble
from route_docs.document.config import SpecConfig, load_config
from route_docs.document.serialize import detect_output_format, dump_document
from route_docs.registry.registry import RouteRegistry
from route_docs.router import Router


def _load_registry(app_ref: str) -> RouteRegistry:
    """Resolve 'package.module:attribute' to a route registry."""
    module_name, _, attr = app_ref.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"expected 'module:attribute', got {app_ref!r}", param_hint="APP_REF")

    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}", param_hint="APP_REF") from e

    target = getattr(module, attr, None)
    if isinstance(target, Router):
        return target.registry
    if isinstance(target, RouteRegistry):
        return target
    raise click.BadParameter(f"{app_ref!r} is not a Router or RouteRegistry", param_hint="APP_REF")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """route-docs: build OpenAPI documents from registered routes."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("app_ref")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the document.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML/JSON file with document settings.")
@click.option("--title", default=None, help="Document title.")
@click.option("--version", "doc_version", default=None, help="Document version.")
@click.option("--prefix", default=None, help="Path prefix applied to every route.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
def export(app_ref: str, output: Path, config_path: Path | None, title: str | None, doc_version: str | None, prefix: str | None, fmt: str):
    """Assemble the document for APP_REF (module:attribute) and write it to a file."""
    if config_path is not None:
        config = load_config(config_path, title=title, version=doc_version, prefix=prefix)
    else:
        if not title or not doc_version:
            raise click.UsageError("--title and --version are required without --config")
        config = SpecConfig(title=title, version=doc_version, prefix=prefix or "")

    click.echo(f"Loading routes from {app_ref}...")
    registry = _load_registry(app_ref)
    click.echo(f"Found {len(registry)} routes.")

    if fmt == "auto":
        fmt = detect_output_format(output)
    document = assemble(registry, config)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_document(document, fmt), encoding="utf-8")
    click.echo(f"Document ({len(document['paths'])} paths) saved to {output}")
