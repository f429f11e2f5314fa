"""Turn a graph's declared inputs plus the user's held values into run inputs.

Every declared input is dispatched through the strategy registry; inputs
without a strategy pass their held value through.  All inputs are
materialized concurrently and the first failure aborts the whole batch, so a
run is never submitted with a partial set of inputs.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Sequence

from graphlink.elements.walker import ElementTreeWalker
from graphlink.execution.models import GraphInfo, GraphInput, RunInput
from graphlink.inputs import strategies  # noqa: F401  (registers the built-ins)
from graphlink.inputs.registry import ExtractionContext, StrategyRegistry, registry
from graphlink.model.service import ModelService

logger = logging.getLogger(__name__)

BOOLEAN_TYPES = {"boolean"}
DROPDOWN_TYPES = {"DSDropDownBase", "CustomSelection"}


def encode_held_value(value: Any) -> str:
    """JSON-encode a held value; a plain string becomes a JSON string literal."""
    return json.dumps(value)


async def materialize_input(
    ctx: ExtractionContext,
    graph_input: GraphInput,
    value: Any,
    *,
    strategy_registry: StrategyRegistry = registry,
) -> RunInput | None:
    """Materialize one input; ``None`` when there is nothing to send."""
    registration = strategy_registry.lookup(graph_input)
    if registration is None:
        if value is None:
            return None
        return RunInput(node_id=graph_input.id, value=encode_held_value(value))

    logger.debug("Extracting %s (%s)", graph_input.name or graph_input.id, graph_input.type)
    extracted = await registration.strategy(ctx, graph_input, value)
    return RunInput(node_id=graph_input.id, value=json.dumps(extracted))


async def materialize_inputs(
    model: ModelService,
    inputs: Sequence[GraphInput],
    values: Mapping[str, Any],
    *,
    strategy_registry: StrategyRegistry = registry,
    scale_elevation: bool | None = None,
) -> list[RunInput]:
    """Materialize every declared input.

    Args:
        model: The model the graph runs against.
        inputs: Inputs declared by the graph (``GraphInfo.inputs``).
        values: Held values keyed by input id.  Selection inputs hold a list
            of element paths.
        strategy_registry: Registry to dispatch on; defaults to the built-ins.
        scale_elevation: Override for ``settings.scale_elevation``.

    Returns:
        Run inputs in declaration order.  Inputs with no strategy and no
        held value are left out so the graph keeps its own default.
    """
    ctx = ExtractionContext(
        model=model,
        walker=ElementTreeWalker(model, scale_elevation=scale_elevation),
    )
    materialized = await asyncio.gather(
        *(
            materialize_input(
                ctx,
                graph_input,
                values.get(graph_input.id),
                strategy_registry=strategy_registry,
            )
            for graph_input in inputs
        )
    )
    return [run_input for run_input in materialized if run_input is not None]


def default_values(
    info: GraphInfo,
    *,
    strategy_registry: StrategyRegistry = registry,
) -> dict[str, Any]:
    """Initial editing state for a freshly loaded graph.

    Inputs served by a strategy are skipped: their value is either computed
    at run time or a selection that does not survive between sessions.
    """
    state: dict[str, Any] = {}
    for graph_input in info.inputs:
        if strategy_registry.lookup(graph_input) is not None:
            continue
        if not graph_input.value:
            continue
        if graph_input.type in BOOLEAN_TYPES:
            state[graph_input.id] = str(graph_input.value).lower() == "true"
        elif graph_input.type in DROPDOWN_TYPES:
            state[graph_input.id] = str(graph_input.value).split(":")[0]
        else:
            state[graph_input.id] = graph_input.value
    return state
