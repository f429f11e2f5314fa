"""Inputs package — materializes graph inputs from the model."""

from graphlink.inputs.materializer import (
    default_values,
    encode_held_value,
    materialize_input,
    materialize_inputs,
)
from graphlink.inputs.registry import ExtractionContext, StrategyRegistry, registry

__all__ = [
    "ExtractionContext",
    "StrategyRegistry",
    "registry",
    "default_values",
    "encode_held_value",
    "materialize_input",
    "materialize_inputs",
]
