"""Built-in extraction strategies, one per family of graph input types.

Each strategy returns the *logical* value for its input; the materializer
JSON-encodes it.  Per-path sub-queries inside a strategy run concurrently.
"""

from __future__ import annotations

import asyncio
from typing import Any

from graphlink.errors import ElementNotFoundError
from graphlink.execution.models import GraphInput
from graphlink.geometry.transform import IDENTITY
from graphlink.inputs.registry import ExtractionContext, registry
from graphlink.model.models import ROOT_PATH

TERRAIN_CATEGORY = "terrain"


def _paths(value: Any) -> list[str]:
    return list(value or [])


async def _terrain_paths(ctx: ExtractionContext) -> list[str]:
    paths = await ctx.model.get_paths_by_category(TERRAIN_CATEGORY)
    if not paths:
        raise ElementNotFoundError(f"{ROOT_PATH}[category={TERRAIN_CATEGORY}]")
    return paths


async def _urn_and_transform(ctx: ExtractionContext, path: str) -> tuple[str, list[float]]:
    if path == ROOT_PATH:
        lookup = await ctx.model.get_by_path(path)
        transform = list(IDENTITY)
    else:
        lookup, transform = await asyncio.gather(
            ctx.model.get_by_path(path),
            ctx.model.get_world_transform(path),
        )
    if lookup.element is None:
        raise ElementNotFoundError(path)
    return lookup.element.urn, list(transform)


# ---------------------------------------------------------------------------
# Element references with world transforms
# ---------------------------------------------------------------------------

@registry.register(types=["SelectElementsExperimental"], kind="select")
async def selected_element_transforms(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    pairs = await asyncio.gather(*(_urn_and_transform(ctx, p) for p in _paths(value)))
    return {"elements": dict(pairs), "region": ctx.model.get_region()}


@registry.register(types=["GetTerrainExperimental"])
async def terrain_element_transform(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    path, *_ = await _terrain_paths(ctx)
    urn, transform = await _urn_and_transform(ctx, path)
    return {"elements": {urn: transform}, "region": ctx.model.get_region()}


# ---------------------------------------------------------------------------
# Whole-model references
# ---------------------------------------------------------------------------

@registry.register(types=["GetAllElementsExperimental"])
async def model_reference(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    return {"urn": await ctx.model.get_root_urn(), "region": ctx.model.get_region()}


@registry.register(types=["GetProjectExperimental"])
async def project_reference(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    return {"projectId": ctx.model.get_project_id(), "region": ctx.model.get_region()}


@registry.register(types=["FormaProject", "GetProject"])
async def project_record(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    return await ctx.model.get_project()


# ---------------------------------------------------------------------------
# Terrain
# ---------------------------------------------------------------------------

@registry.register(types=["FormaTerrain"])
async def terrain_triangles(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> list[list[float]]:
    path, *_ = await _terrain_paths(ctx)
    return [list(await ctx.model.get_triangles(path) or [])]


@registry.register(types=["GetTerrain"])
async def terrain_bundle(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    bundles = await ctx.walker.collect_geometry_for(await _terrain_paths(ctx))
    return bundles[0].to_dict()


# ---------------------------------------------------------------------------
# Geometry bundles
# ---------------------------------------------------------------------------

@registry.register(
    types=["FormaSelectElements", "FormaSelectElement", "SelectElements"], kind="select"
)
async def selected_bundles(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> list[dict[str, Any]]:
    bundles = await ctx.walker.collect_geometry_for(_paths(value))
    return [bundle.to_dict() for bundle in bundles]


@registry.register(types=["GetAllElements"], names=["GetFormaElements"])
async def all_bundles(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> list[dict[str, Any]]:
    paths = await ctx.walker.enumerate_paths()
    bundles = await ctx.walker.collect_geometry_for(paths)
    return [bundle.to_dict() for bundle in bundles]


# ---------------------------------------------------------------------------
# Raw geometry and metrics for selected paths
# ---------------------------------------------------------------------------

@registry.register(types=["FormaSelectGeometry"], names=["Triangles"], kind="select")
async def selected_triangles(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> list[list[float]]:
    meshes = await asyncio.gather(*(ctx.model.get_triangles(p) for p in _paths(value)))
    return [list(mesh or []) for mesh in meshes]


@registry.register(types=["FormaSelectFootprints"], names=["Footprint"], kind="select")
async def selected_footprints(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> list[list[list[list[float]]]]:
    footprints = await asyncio.gather(*(ctx.model.get_footprint(p) for p in _paths(value)))
    return [list(rings or []) for rings in footprints]


@registry.register(
    types=["FormaSelectMetrics", "SelectMetrics"], names=["Metrics"], kind="select"
)
async def selected_area_metrics(
    ctx: ExtractionContext, graph_input: GraphInput, value: Any
) -> dict[str, Any]:
    return await ctx.model.calculate_area_metrics(_paths(value))
