"""Execution package — client for the graph execution service."""

from graphlink.execution.client import GraphExecutionClient, is_loopback, static_token
from graphlink.execution.models import (
    CurrentGraphTarget,
    FolderGraphInfo,
    GraphInfo,
    GraphInput,
    Issue,
    JsonGraphTarget,
    PathGraphTarget,
    RunInput,
    RunResult,
    ServerInfo,
    ServiceState,
)
from graphlink.execution.polling import PollPolicy

__all__ = [
    "GraphExecutionClient",
    "PollPolicy",
    "is_loopback",
    "static_token",
    "CurrentGraphTarget",
    "JsonGraphTarget",
    "PathGraphTarget",
    "FolderGraphInfo",
    "GraphInfo",
    "GraphInput",
    "Issue",
    "RunInput",
    "RunResult",
    "ServerInfo",
    "ServiceState",
]
