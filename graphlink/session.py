"""Reload/run lifecycle for one script against one model.

State is immutable: every transition builds a new :class:`SessionState`
and swaps it in, so a coroutine suspended mid-run never observes a
half-updated state.  Each reload and each run carries a generation number;
a completion whose generation is no longer current is discarded instead of
overwriting newer state.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Literal

from graphlink.errors import UntrustedGraphError
from graphlink.execution.client import GraphExecutionClient
from graphlink.execution.models import GraphInfo, JsonGraphTarget, PathGraphTarget, RunResult
from graphlink.inputs.materializer import default_values, materialize_inputs
from graphlink.model.service import ModelService

logger = logging.getLogger(__name__)

GRAPH_NOT_TRUSTED = "GRAPH_NOT_TRUSTED"

ErrorReporter = Callable[[BaseException, str], None]


def log_error(exc: BaseException, context: str) -> None:
    logger.error("%s: %s", context, exc, exc_info=exc)


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FolderScript:
    """A graph stored on the execution service, addressed by path."""

    id: str
    name: str = ""

    @property
    def folder(self) -> str:
        sep = "\\" if "\\" in self.id else "/"
        return self.id.rsplit(sep, 1)[0] if sep in self.id else self.id


@dataclass(frozen=True)
class JsonScript:
    """A graph carried inline as its JSON document."""

    graph: Any
    name: str = ""


Script = FolderScript | JsonScript


def info_target(script: Script) -> PathGraphTarget | JsonGraphTarget:
    if isinstance(script, JsonScript):
        return JsonGraphTarget(graph=script.graph)
    return PathGraphTarget(path=script.id)


def run_target(script: Script, info: GraphInfo) -> PathGraphTarget | JsonGraphTarget:
    if isinstance(script, JsonScript):
        return JsonGraphTarget(contents=json.dumps(script.graph))
    return PathGraphTarget(path=info.id)


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScriptState:
    kind: Literal["init", "loading", "loaded", "error"] = "init"
    info: GraphInfo | None = None
    error: str | None = None

    @property
    def not_trusted(self) -> bool:
        return self.kind == "error" and self.error == GRAPH_NOT_TRUSTED


@dataclass(frozen=True)
class RunState:
    kind: Literal["init", "running", "success", "error"] = "init"
    result: RunResult | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class SessionState:
    script: ScriptState = field(default_factory=ScriptState)
    values: dict[str, Any] = field(default_factory=dict)
    run: RunState = field(default_factory=RunState)


@dataclass(frozen=True)
class SessionWarning:
    id: str
    title: str
    description: str


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class ScriptSession:
    def __init__(
        self,
        script: Script,
        client: GraphExecutionClient,
        model: ModelService,
        *,
        error_reporter: ErrorReporter = log_error,
        scale_elevation: bool | None = None,
    ) -> None:
        self.script = script
        self._client = client
        self._model = model
        self._report = error_reporter
        self._scale_elevation = scale_elevation
        self._state = SessionState()
        self._reload_generation = 0
        self._run_generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    def _commit(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)

    # ------------------------------------------------------------------
    # Reload
    # ------------------------------------------------------------------

    async def reload(self) -> ScriptState:
        """Fetch the script's graph info and reset the editing values."""
        self._reload_generation += 1
        generation = self._reload_generation
        self._commit(script=ScriptState(kind="loading"))

        try:
            info = await self._client.info(info_target(self.script))
        except UntrustedGraphError:
            loaded = ScriptState(kind="error", error=GRAPH_NOT_TRUSTED)
        except Exception as exc:
            loaded = ScriptState(kind="error", error=str(exc))
        else:
            loaded = ScriptState(kind="loaded", info=info)

        if generation != self._reload_generation:
            logger.debug("Discarding stale reload #%d", generation)
            return self._state.script

        if loaded.kind == "loaded":
            self._run_generation += 1
            self._commit(script=loaded, values=default_values(loaded.info), run=RunState())
        else:
            self._commit(script=loaded)
        return loaded

    async def trust_and_reload(self) -> ScriptState:
        """Trust the folder holding the script, then reload it."""
        if not isinstance(self.script, FolderScript):
            raise ValueError("Only folder-backed scripts can be trusted")
        trusted = await self._client.trust(self.script.folder)
        logger.info("Trust request for %s returned %s", self.script.folder, trusted)
        return await self.reload()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_value(self, input_id: str, value: Any) -> None:
        """Update one held value; any previous run result is dropped."""
        self._run_generation += 1
        self._commit(values={**self._state.values, input_id: value}, run=RunState())

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> RunState:
        script_state = self._state.script
        if script_state.kind != "loaded" or script_state.info is None:
            return self._state.run

        self._run_generation += 1
        generation = self._run_generation
        self._commit(run=RunState(kind="running"))

        info = script_state.info
        try:
            inputs = await materialize_inputs(
                self._model,
                info.inputs,
                self._state.values,
                scale_elevation=self._scale_elevation,
            )
            result = await self._client.run(run_target(self.script, info), inputs)
        except Exception as exc:
            self._report(exc, "Error running graph")
            outcome = RunState(kind="error", error=exc)
        else:
            outcome = RunState(kind="success", result=result)

        if generation != self._run_generation:
            logger.debug("Discarding stale run #%d", generation)
            return outcome
        self._commit(run=outcome)
        return outcome

    def warnings(self) -> list[SessionWarning]:
        run = self._state.run
        if run.kind != "success" or run.result is None:
            return []
        return [
            SessionWarning(id=issue.node_id, title=issue.node_name, description=issue.message)
            for issue in run.result.info.issues
        ]
