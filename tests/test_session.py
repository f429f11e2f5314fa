"""Tests for graphlink.session — reload/run lifecycle of a script session.

The execution client is replaced by a mock; the model is the in-memory site
snapshot so input materialization runs for real.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from graphlink.errors import TransportError, UntrustedGraphError
from graphlink.execution.models import GraphInfo, JsonGraphTarget, PathGraphTarget, RunResult
from graphlink.model.snapshot import SnapshotModelService
from graphlink.session import FolderScript, JsonScript, ScriptSession

INFO = GraphInfo.model_validate(
    {
        "id": "graphs/site.dyn",
        "name": "Site",
        "inputs": [
            {"id": "flag", "type": "boolean", "value": "true"},
            {"id": "model", "type": "GetAllElementsExperimental"},
        ],
    }
)

RESULT = RunResult.model_validate(
    {
        "info": {
            "id": "graphs/site.dyn",
            "status": "ok",
            "issues": [
                {"nodeId": "n7", "nodeName": "Area", "type": "Warning", "message": "Empty input"}
            ],
        }
    }
)


def _client() -> MagicMock:
    client = MagicMock()
    client.info = AsyncMock(return_value=INFO)
    client.run = AsyncMock(return_value=RESULT)
    client.trust = AsyncMock(return_value=True)
    return client


@pytest.fixture()
def client() -> MagicMock:
    return _client()


@pytest.fixture()
def session(client: MagicMock, site_model: SnapshotModelService) -> ScriptSession:
    return ScriptSession(FolderScript(id="graphs/site.dyn", name="Site"), client, site_model)


class TestScripts:
    def test_folder_of_posix_path(self) -> None:
        assert FolderScript(id="graphs/team/site.dyn").folder == "graphs/team"

    def test_folder_of_windows_path(self) -> None:
        assert FolderScript(id="C:\\graphs\\site.dyn").folder == "C:\\graphs"


class TestReload:
    async def test_loaded_sets_defaults_and_resets_run(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        session.set_value("stale", 1)
        state = await session.reload()

        assert state.kind == "loaded"
        assert session.state.script.info is INFO
        assert session.state.values == {"flag": True}
        assert session.state.run.kind == "init"
        target = client.info.call_args.args[0]
        assert isinstance(target, PathGraphTarget)
        assert target.path == "graphs/site.dyn"

    async def test_json_script_uses_graph_target(self, site_model: SnapshotModelService) -> None:
        client = _client()
        graph = {"Uuid": "abc", "Nodes": []}
        await ScriptSession(JsonScript(graph=graph), client, site_model).reload()
        target = client.info.call_args.args[0]
        assert isinstance(target, JsonGraphTarget)
        assert target.graph == graph

    async def test_untrusted_is_distinguished(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        client.info.side_effect = UntrustedGraphError("Graph is not trusted.", 500)
        state = await session.reload()
        assert state.kind == "error"
        assert state.not_trusted

    async def test_other_errors_keep_message(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        client.info.side_effect = TransportError("Bad Gateway", 502)
        state = await session.reload()
        assert state.kind == "error"
        assert not state.not_trusted
        assert state.error == "HTTP 502: Bad Gateway"

    async def test_stale_reload_is_discarded(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        gate = asyncio.Event()
        newer = GraphInfo(id="graphs/site.dyn", name="Newer")
        calls: list[object] = []

        async def fake_info(target: object) -> GraphInfo:
            calls.append(target)
            if len(calls) == 1:
                await gate.wait()
                return INFO
            return newer

        client.info.side_effect = fake_info
        slow = asyncio.create_task(session.reload())
        await asyncio.sleep(0)
        await session.reload()
        gate.set()
        await slow

        assert session.state.script.info is newer

    async def test_trust_targets_parent_folder(
        self, site_model: SnapshotModelService
    ) -> None:
        client = _client()
        session = ScriptSession(FolderScript(id="C:\\graphs\\site.dyn"), client, site_model)
        state = await session.trust_and_reload()
        client.trust.assert_awaited_once_with("C:\\graphs")
        assert state.kind == "loaded"

    async def test_trust_requires_folder_script(self, site_model: SnapshotModelService) -> None:
        session = ScriptSession(JsonScript(graph={}), _client(), site_model)
        with pytest.raises(ValueError):
            await session.trust_and_reload()


class TestRun:
    async def test_run_before_load_is_a_no_op(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        state = await session.run()
        assert state.kind == "init"
        client.run.assert_not_called()

    async def test_success_exposes_issues_as_warnings(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        await session.reload()
        state = await session.run()

        assert state.kind == "success"
        assert state.result is RESULT
        [warning] = session.warnings()
        assert (warning.id, warning.title, warning.description) == ("n7", "Area", "Empty input")

        target, inputs = client.run.call_args.args
        assert target.path == "graphs/site.dyn"
        assert {i.node_id: i.value for i in inputs} == {
            "flag": "true",
            "model": json.dumps({"urn": "urn:root", "region": "EMEA"}),
        }

    async def test_json_script_runs_with_contents(self, site_model: SnapshotModelService) -> None:
        client = _client()
        graph = {"Uuid": "abc"}
        session = ScriptSession(JsonScript(graph=graph), client, site_model)
        await session.reload()
        await session.run()
        target = client.run.call_args.args[0]
        assert isinstance(target, JsonGraphTarget)
        assert json.loads(target.contents) == graph

    async def test_failure_is_reported(
        self, client: MagicMock, site_model: SnapshotModelService
    ) -> None:
        reporter = MagicMock()
        session = ScriptSession(
            FolderScript(id="graphs/site.dyn"), client, site_model, error_reporter=reporter
        )
        failure = TransportError("Internal Server Error", 500)
        client.run.side_effect = failure

        await session.reload()
        state = await session.run()

        assert state.kind == "error"
        assert state.error is failure
        reporter.assert_called_once_with(failure, "Error running graph")
        assert session.warnings() == []

    async def test_editing_a_value_resets_the_run(self, session: ScriptSession) -> None:
        await session.reload()
        await session.run()
        session.set_value("flag", False)
        assert session.state.run.kind == "init"
        assert session.state.values["flag"] is False

    async def test_result_of_superseded_run_is_discarded(
        self, session: ScriptSession, client: MagicMock
    ) -> None:
        gate = asyncio.Event()

        async def slow_run(target: object, inputs: object) -> RunResult:
            await gate.wait()
            return RESULT

        client.run.side_effect = slow_run
        await session.reload()
        pending = asyncio.create_task(session.run())
        while not client.run.called:
            await asyncio.sleep(0)
        assert session.state.run.kind == "running"

        session.set_value("flag", False)
        gate.set()
        outcome = await pending

        assert outcome.kind == "success"
        assert session.state.run.kind == "init"
