"""Plain-text rendering of graph descriptions and run results for the CLI."""

from __future__ import annotations

import json
from typing import Any

from graphlink.execution.models import FolderGraphInfo, GraphInfo, RunResult
from graphlink.inputs import registry


def _format_value(value: Any, limit: int = 120) -> str:
    text = value if isinstance(value, str) else json.dumps(value)
    if len(text) > limit:
        return text[: limit - 1] + "…"
    return text


def render_graph_info(info: GraphInfo) -> str:
    lines = [f"{info.name or info.id}  [{info.status or 'unknown'}]"]
    if info.metadata.description:
        lines.append(f"  {info.metadata.description}")

    lines.append("Inputs:")
    if not info.inputs:
        lines.append("  (none)")
    for graph_input in info.inputs:
        bounds = graph_input.constraints
        marker = " [select]" if registry.is_selection(graph_input) else ""
        extra = ""
        if bounds.options:
            extra = f"  options={bounds.options}"
        elif bounds.minimum_value is not None or bounds.maximum_value is not None:
            extra = f"  range=[{bounds.minimum_value}, {bounds.maximum_value}] step={bounds.step_value}"
        lines.append(
            f"  {graph_input.id}  {graph_input.name!r} ({graph_input.type})"
            f"{marker}  = {_format_value(graph_input.value)}{extra}"
        )

    lines.append("Outputs:")
    if not info.outputs:
        lines.append("  (none)")
    for output in info.outputs:
        lines.append(f"  {output.id}  {output.name!r} ({output.type})")
    return "\n".join(lines)


def render_folder(graphs: list[FolderGraphInfo]) -> str:
    if not graphs:
        return "No graphs found."
    return "\n".join(f"  {g.id}  {g.name!r}" for g in graphs)


def render_run_result(result: RunResult) -> str:
    info = result.info
    lines = [f"Status: {info.status or 'unknown'}"]
    if result.title:
        lines.append(f"Title : {result.title}")

    lines.append("Outputs:")
    if not info.outputs:
        lines.append("  (none)")
    for output in info.outputs:
        lines.append(f"  {output.name or output.id}: {_format_value(output.value)}")

    if info.issues:
        lines.append("")
        lines.append("⚠️  The graph returned with warnings or errors:")
        for issue in info.issues:
            lines.append(f"  - [{issue.type}] {issue.node_name}: {issue.message.strip()}")
    return "\n".join(lines)
