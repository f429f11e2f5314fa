"""Commands talking to the graph execution service."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import httpx
import typer

from graphlink.config import settings
from graphlink.errors import GraphLinkError
from graphlink.execution.client import GraphExecutionClient
from graphlink.inputs import registry
from graphlink.model.snapshot import SnapshotModelService
from graphlink.session import FolderScript, JsonScript, Script, ScriptSession, info_target

from cli.rendering import render_folder, render_graph_info, render_run_result

graph_app = typer.Typer(help="Inspect, trust and run graphs.", no_args_is_help=True)


@graph_app.callback()
def graph_options(
    ctx: typer.Context,
    url: str = typer.Option(None, "--url", help="Execution service base URL."),
    mode: str = typer.Option(None, "--mode", help="Execution mode: auto | sync | async."),
) -> None:
    ctx.obj = {"url": url or settings.service_url, "mode": mode or settings.execution_mode}


def _client(ctx: typer.Context) -> GraphExecutionClient:
    return GraphExecutionClient(ctx.obj["url"], execution_mode=ctx.obj["mode"])


def _script(path: Optional[str], json_file: Optional[Path]) -> Script:
    if bool(path) == bool(json_file):
        typer.echo("❌ Pass exactly one of --path or --json-file.")
        raise typer.Exit(code=1)
    if path:
        return FolderScript(id=path, name=path)
    graph = json.loads(json_file.read_text(encoding="utf-8"))
    name = graph.get("Name") if isinstance(graph, dict) else None
    return JsonScript(graph=graph, name=name or json_file.stem)


def _held_value(raw: str) -> Any:
    """`5`, `true` or `[1, 2]` are read as JSON; anything else stays a string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _parse_pairs(pairs: Optional[List[str]], option: str) -> list[tuple[str, str]]:
    parsed = []
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            typer.echo(f"❌ {option} expects ID=VALUE, got {pair!r}.")
            raise typer.Exit(code=1)
        parsed.append((key, value))
    return parsed


@graph_app.command("server-info")
def graph_server_info(ctx: typer.Context) -> None:
    """Show the versions reported by the execution service."""

    async def _go():
        async with _client(ctx) as client:
            return await client.server_info()

    try:
        info = asyncio.run(_go())
    except (GraphLinkError, httpx.HTTPError) as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    typer.echo(f"[server-info] API {info.api_version}  Dynamo {info.dynamo_version}  Player {info.player_version}")


@graph_app.command("status")
def graph_status(ctx: typer.Context) -> None:
    """Report whether the execution service is online."""

    async def _go():
        async with _client(ctx) as client:
            return await client.status()

    state = asyncio.run(_go())
    typer.echo(f"[status] {ctx.obj['url']}: {state.status}")
    if state.error:
        typer.echo(f"[status] {state.error}")
    if state.status != "online":
        raise typer.Exit(code=1)


@graph_app.command("folder")
def graph_folder(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Folder on the execution service host."),
) -> None:
    """List the graphs stored in a folder."""

    async def _go():
        async with _client(ctx) as client:
            return await client.folder(path)

    try:
        graphs = asyncio.run(_go())
    except (GraphLinkError, httpx.HTTPError) as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    typer.echo(render_folder(graphs))


@graph_app.command("info")
def graph_info(
    ctx: typer.Context,
    path: Optional[str] = typer.Option(None, "--path", help="Graph path on the service host."),
    json_file: Optional[Path] = typer.Option(None, "--json-file", help="Local graph JSON file."),
) -> None:
    """Show a graph's inputs and outputs."""
    script = _script(path, json_file)

    async def _go():
        async with _client(ctx) as client:
            return await client.info(info_target(script))

    try:
        info = asyncio.run(_go())
    except (GraphLinkError, httpx.HTTPError) as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    typer.echo(render_graph_info(info))


@graph_app.command("trust")
def graph_trust(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Folder to mark as trusted."),
) -> None:
    """Trust a folder so its graphs can be inspected and run."""

    async def _go():
        async with _client(ctx) as client:
            return await client.trust(path)

    try:
        trusted = asyncio.run(_go())
    except (GraphLinkError, httpx.HTTPError) as exc:
        typer.echo(f"❌ Error: {exc}")
        raise typer.Exit(code=1)
    if not trusted:
        typer.echo(f"❌ The service refused to trust {path!r}.")
        raise typer.Exit(code=1)
    typer.echo(f"✅ Trusted folder: {path}")


@graph_app.command("run")
def graph_run(
    ctx: typer.Context,
    model: Path = typer.Option(..., "--model", help="Model snapshot JSON file."),
    path: Optional[str] = typer.Option(None, "--path", help="Graph path on the service host."),
    json_file: Optional[Path] = typer.Option(None, "--json-file", help="Local graph JSON file."),
    set_: Optional[List[str]] = typer.Option(None, "--set", help="Input value as ID=VALUE (VALUE read as JSON when it parses)."),
    select: Optional[List[str]] = typer.Option(
        None, "--select", help="Element selection as ID=PATH[,PATH...]."
    ),
    trust: bool = typer.Option(False, "--trust", help="Trust the graph's folder if needed."),
) -> None:
    """Materialize inputs from a model snapshot and run a graph."""
    script = _script(path, json_file)
    values = _parse_pairs(set_, "--set")
    selections = [
        (key, [p for p in value.split(",") if p])
        for key, value in _parse_pairs(select, "--select")
    ]
    model_service = SnapshotModelService.from_file(model)

    async def _go():
        async with _client(ctx) as client:
            session = ScriptSession(script, client, model_service)
            state = await session.reload()
            if state.not_trusted and trust and isinstance(script, FolderScript):
                typer.echo(f"[run] Trusting {script.folder!r} …")
                state = await session.trust_and_reload()
            if state.not_trusted:
                typer.echo("❌ Graph is not trusted. Re-run with --trust to trust its folder.")
                raise typer.Exit(code=1)
            if state.kind != "loaded":
                typer.echo(f"❌ Error: {state.error}")
                raise typer.Exit(code=1)

            for key, value in values:
                session.set_value(key, _held_value(value))
            declared = {i.id: i for i in state.info.inputs}
            for key, paths in selections:
                if key not in declared or not registry.is_selection(declared[key]):
                    typer.echo(f"❌ --select needs an element-selection input, {key!r} is not one.")
                    raise typer.Exit(code=1)
                session.set_value(key, paths)

            typer.echo(f"[run] Running {script.name or 'graph'!r} …")
            return await session.run()

    outcome = asyncio.run(_go())
    if outcome.kind != "success":
        typer.echo(f"❌ Run failed: {outcome.error}")
        raise typer.Exit(code=1)
    typer.echo(render_run_result(outcome.result))
