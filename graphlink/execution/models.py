"""Pydantic schemas for the graph execution service wire format.

Field names follow the service's camelCase JSON; unknown fields are kept so
nothing the service sends is lost on the way back to the caller.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------

class PathGraphTarget(_Wire):
    type: Literal["PathGraphTarget"] = "PathGraphTarget"
    path: str
    force_reopen: bool | None = Field(default=None, alias="forceReopen")


class CurrentGraphTarget(_Wire):
    type: Literal["CurrentGraphTarget"] = "CurrentGraphTarget"


class JsonGraphTarget(_Wire):
    type: Literal["JsonGraphTarget"] = "JsonGraphTarget"
    graph: Any = None
    contents: str | None = None


GraphTarget = Annotated[
    Union[PathGraphTarget, CurrentGraphTarget, JsonGraphTarget],
    Field(discriminator="type"),
]


def target_payload(target: PathGraphTarget | CurrentGraphTarget | JsonGraphTarget) -> dict[str, Any]:
    return target.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Graph description
# ---------------------------------------------------------------------------

class InputConstraints(_Wire):
    options: list[str] = Field(default_factory=list)
    minimum_value: float | None = Field(default=None, alias="minimumValue")
    maximum_value: float | None = Field(default=None, alias="maximumValue")
    step_value: float | None = Field(default=None, alias="stepValue")


class GraphInput(_Wire):
    id: str
    name: str = ""
    type: str = ""
    value: Any = None
    constraints: InputConstraints = Field(
        default_factory=InputConstraints, alias="nodeTypeProperties"
    )


class GraphOutput(_Wire):
    id: str
    name: str = ""
    type: str = ""
    value: Any = None
    value_string: dict[str, Any] | None = Field(default=None, alias="valueString")


class Metadata(_Wire):
    author: str = ""
    description: str = ""
    dynamo_version: str = Field(default="", alias="dynamoVersion")
    thumbnail: str = ""
    custom_properties: Any = Field(default=None, alias="customProperties")


class Dependency(_Wire):
    name: str
    version: str = ""
    type: str = ""
    state: str = ""


class GraphInfo(_Wire):
    id: str
    name: str = ""
    status: str = ""
    metadata: Metadata = Field(default_factory=Metadata)
    inputs: list[GraphInput] = Field(default_factory=list)
    outputs: list[GraphOutput] = Field(default_factory=list)
    issues: list[Any] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)


class FolderGraphInfo(_Wire):
    type: Literal["FolderGraph"] = "FolderGraph"
    id: str
    name: str = ""
    metadata: Metadata = Field(default_factory=Metadata)


class ServerInfo(_Wire):
    api_version: str = Field(alias="apiVersion")
    dynamo_version: str = Field(default="", alias="dynamoVersion")
    player_version: str = Field(default="", alias="playerVersion")


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------

class RunInput(_Wire):
    node_id: str = Field(alias="nodeId")
    value: str


class Issue(_Wire):
    node_id: str = Field(alias="nodeId")
    node_name: str = Field(default="", alias="nodeName")
    type: str = ""
    message: str = ""


class RunInfo(_Wire):
    id: str = ""
    name: str = ""
    status: str = ""
    outputs: list[GraphOutput] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)


class RunResult(_Wire):
    info: RunInfo
    title: str | None = None

    @property
    def has_issues(self) -> bool:
        return bool(self.info.issues)


class ServiceState(BaseModel):
    """Reachability of the execution service as seen by the client."""

    status: Literal["online", "offline", "error"]
    server_info: ServerInfo | None = None
    error: str | None = None
