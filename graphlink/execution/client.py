"""Async HTTP client for the graph execution service.

Two ways to run a graph:

* **sync** — one ``POST /v1/graph/run`` that answers with the run result.
  Meant for a local, low-latency service.
* **async** — create a job, upload the payload to the returned upload URL,
  trigger the job, then poll ``/v1/graph/results/{jobId}`` until it reaches a
  terminal state or the :class:`PollPolicy` gives up.

``info`` and ``folder`` are read-only and safe to retry.  ``run`` has side
effects in the target graph and is never retried here.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Sequence
from urllib.parse import urlparse

import httpx

from graphlink.config import settings
from graphlink.errors import (
    UNTRUSTED_GRAPH_MESSAGE,
    JobFailedError,
    JobTimeoutError,
    TransportError,
    UntrustedGraphError,
)
from graphlink.execution.models import (
    FolderGraphInfo,
    GraphInfo,
    RunInput,
    RunResult,
    ServerInfo,
    ServiceState,
    target_payload,
)
from graphlink.execution.polling import PollPolicy

logger = logging.getLogger(__name__)

AuthProvider = Callable[[], Awaitable[str]]

_LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}
_DONE_STATES = {"COMPLETE", "SUCCESS"}
_FAILED_STATE = "FAILED"
_INFO_FIELDS = {
    "metadata": True,
    "issues": True,
    "status": True,
    "inputs": True,
    "outputs": True,
    "dependencies": True,
}


def is_loopback(url: str) -> bool:
    return (urlparse(url).hostname or "").lower() in _LOOPBACK_HOSTS


def static_token(token: str) -> AuthProvider:
    """Wrap a fixed Authorization value as an auth provider."""

    async def _provider() -> str:
        return token

    return _provider


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict):
        return body.get("title") or body.get("message") or response.reason_phrase
    return response.reason_phrase


class GraphExecutionClient:
    """Talks to one graph execution service.

    Use as an async context manager, or call :meth:`aclose` when done::

        async with GraphExecutionClient("https://graphs.example.com") as client:
            info = await client.info(PathGraphTarget(path="graphs/site.dyn"))
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        auth_provider: AuthProvider | None = None,
        execution_mode: str | None = None,
        poll_policy: PollPolicy | None = None,
        timeout: float | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.service_url).rstrip("/")
        self.execution_mode = execution_mode or settings.execution_mode
        self.poll_policy = poll_policy or PollPolicy.from_settings()
        if auth_provider is None and settings.auth_token:
            auth_provider = static_token(settings.auth_token)
        self._auth_provider = auth_provider
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.request_timeout
        )

    async def __aenter__(self) -> GraphExecutionClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def runs_synchronously(self) -> bool:
        if self.execution_mode == "sync":
            return True
        if self.execution_mode == "async":
            return False
        return is_loopback(self.base_url)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        request = self._http.build_request(method, f"{self.base_url}{path}", **kwargs)
        if self._auth_provider is not None and "Authorization" not in request.headers:
            request.headers["Authorization"] = await self._auth_provider()
        return await self._http.send(request)

    @staticmethod
    def _check(response: httpx.Response, *, expect: int | None = None) -> httpx.Response:
        """Return *response* if it succeeded, otherwise raise the matching error.

        With *expect* set only that exact status counts as success.
        """
        ok = response.status_code == expect if expect is not None else response.is_success
        if ok:
            return response
        message = _error_message(response)
        if response.status_code == 500 and message == UNTRUSTED_GRAPH_MESSAGE:
            raise UntrustedGraphError(message, response.status_code)
        raise TransportError(message, response.status_code)

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    @staticmethod
    def _run_payload(target: Any, inputs: Sequence[RunInput]) -> dict[str, Any]:
        return {
            "target": target_payload(target),
            "ignoreInputs": False,
            "getImage": False,
            "getGeometry": False,
            "getContents": False,
            "inputs": [i.model_dump(by_alias=True) for i in inputs],
        }

    async def run(self, target: Any, inputs: Sequence[RunInput]) -> RunResult:
        """Execute *target* with *inputs* and return the run result.

        Raises:
            UntrustedGraphError: If the graph's folder is not trusted.
            TransportError: On any other non-success response.
            JobFailedError: If an async job ends in ``FAILED``.
            JobTimeoutError: If polling exceeds the poll policy.
        """
        payload = self._run_payload(target, inputs)
        if self.runs_synchronously:
            return await self._run_sync(payload)
        return await self._run_async(payload)

    async def _run_sync(self, payload: dict[str, Any]) -> RunResult:
        logger.info("[run] synchronous run against %s", self.base_url)
        response = self._check(await self._request("POST", "/v1/graph/run", json=payload))
        return RunResult.model_validate(response.json())

    async def _run_async(self, payload: dict[str, Any]) -> RunResult:
        create = self._check(await self._request("GET", "/v1/graph/job/create"), expect=200)
        job = create.json()
        job_id, upload_url = job["jobId"], job["uploadUrl"]
        logger.info("[run] created job %s", job_id)

        # The upload URL is pre-signed; it must not carry our Authorization.
        upload = await self._http.put(upload_url, content=json.dumps(payload))
        self._check(upload)

        trigger = await self._request("POST", f"/v1/graph/job/{job_id}/run", params={"passtoken": 1})
        self._check(trigger, expect=200)
        logger.info("[run] triggered job %s", job_id)

        return await self._poll(job_id)

    async def _poll(self, job_id: str) -> RunResult:
        policy = self.poll_policy
        started = time.monotonic()
        attempts = 0
        while True:
            attempts += 1
            response = self._check(await self._request("GET", f"/v1/graph/results/{job_id}"))
            job = response.json()
            status = job.get("status")
            if status in _DONE_STATES:
                logger.info("[run] job %s finished after %d poll(s)", job_id, attempts)
                return RunResult.model_validate(job["result"])
            if status == _FAILED_STATE:
                raise JobFailedError(job_id, job.get("message") or "Job failed")
            if policy.exhausted(attempts, started):
                raise JobTimeoutError(job_id, attempts, time.monotonic() - started)
            logger.debug("[run] job %s is %s (poll %d)", job_id, status, attempts)
            await asyncio.sleep(policy.delay(attempts))

    # ------------------------------------------------------------------
    # Read-only endpoints
    # ------------------------------------------------------------------

    async def info(self, target: Any) -> GraphInfo:
        """Fetch inputs, outputs and metadata of *target*.

        Raises:
            UntrustedGraphError: If the graph's folder is not trusted.
            TransportError: For any other non-200 response.
        """
        response = await self._request(
            "POST",
            "/v1/graph/info",
            json={"target": target_payload(target), "data": _INFO_FIELDS},
        )
        return GraphInfo.model_validate(self._check(response, expect=200).json())

    async def folder(self, path: str) -> list[FolderGraphInfo]:
        response = self._check(
            await self._request(
                "POST", "/v1/graph-folder/info", json={"path": path.replace("\\", "\\\\")}
            )
        )
        return [FolderGraphInfo.model_validate(item) for item in response.json()]

    async def trust(self, path: str) -> bool:
        response = self._check(
            await self._request("POST", "/v1/settings/trusted-folder", json={"path": path})
        )
        return bool(response.json())

    async def server_info(self) -> ServerInfo:
        response = self._check(await self._request("GET", "/v1/server-info"))
        return ServerInfo.model_validate(response.json())

    async def status(self) -> ServiceState:
        """Probe the service; never raises for an unreachable server."""
        try:
            info = await self.server_info()
        except httpx.TransportError as exc:
            logger.info("Execution service at %s is unreachable: %s", self.base_url, exc)
            return ServiceState(status="offline")
        except TransportError as exc:
            return ServiceState(status="error", error=str(exc))
        return ServiceState(status="online", server_info=info)
