"""Registry mapping graph input kinds to extraction strategies.

A strategy is registered under one or more type tags and, optionally, under
declared input names.  Lookup tries the type tag first, then the name; an
input matching neither falls back to its held value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Literal

from graphlink.execution.models import GraphInput

if TYPE_CHECKING:
    from graphlink.elements.walker import ElementTreeWalker
    from graphlink.model.service import ModelService

StrategyKind = Literal["select", "query"]


@dataclass
class ExtractionContext:
    """What every strategy gets to work with during one run."""

    model: ModelService
    walker: ElementTreeWalker


Strategy = Callable[[ExtractionContext, GraphInput, Any], Awaitable[Any]]


@dataclass(frozen=True)
class Registration:
    strategy: Strategy
    kind: StrategyKind


class StrategyRegistry:
    def __init__(self) -> None:
        self._by_type: dict[str, Registration] = {}
        self._by_name: dict[str, Registration] = {}

    def register(
        self,
        *,
        types: Iterable[str] = (),
        names: Iterable[str] = (),
        kind: StrategyKind = "query",
    ) -> Callable[[Strategy], Strategy]:
        """Decorator registering a strategy.

        ``kind="select"`` marks inputs whose held value is a list of element
        paths picked by the user; ``"query"`` strategies ignore the held value.
        """

        def decorator(strategy: Strategy) -> Strategy:
            registration = Registration(strategy=strategy, kind=kind)
            for tag in types:
                if tag in self._by_type:
                    raise ValueError(f"Type tag {tag!r} is already registered")
                self._by_type[tag] = registration
            for name in names:
                if name in self._by_name:
                    raise ValueError(f"Input name {name!r} is already registered")
                self._by_name[name] = registration
            return strategy

        return decorator

    def lookup(self, graph_input: GraphInput) -> Registration | None:
        return self._by_type.get(graph_input.type) or self._by_name.get(graph_input.name)

    def is_selection(self, graph_input: GraphInput) -> bool:
        """True when *graph_input* takes a list of user-selected element paths."""
        registration = self.lookup(graph_input)
        return registration is not None and registration.kind == "select"

    def type_tags(self) -> list[str]:
        return sorted(self._by_type)


registry = StrategyRegistry()
