"""Commands reading a model snapshot without touching the execution service."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List

import typer

from graphlink.elements.walker import ElementTreeWalker
from graphlink.errors import GraphLinkError
from graphlink.model.snapshot import SnapshotModelService

model_app = typer.Typer(help="Explore a model snapshot.", no_args_is_help=True)


@model_app.command("paths")
def model_paths(
    model: Path = typer.Option(..., "--model", help="Model snapshot JSON file."),
) -> None:
    """List every element path reachable from the root."""
    walker = ElementTreeWalker(SnapshotModelService.from_file(model))
    try:
        paths = asyncio.run(walker.enumerate_paths())
    except GraphLinkError as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    for path in paths:
        typer.echo(f"  {path}")


@model_app.command("geometry")
def model_geometry(
    paths: List[str] = typer.Argument(..., help="Element paths to collect."),
    model: Path = typer.Option(..., "--model", help="Model snapshot JSON file."),
) -> None:
    """Print the geometry bundles a graph would receive for PATHS."""
    walker = ElementTreeWalker(SnapshotModelService.from_file(model))
    try:
        bundles = asyncio.run(walker.collect_geometry_for(paths))
    except GraphLinkError as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    typer.echo(json.dumps([bundle.to_dict() for bundle in bundles], indent=2))
