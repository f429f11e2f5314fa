"""Exception hierarchy for graphlink.

Everything raised on purpose derives from :class:`GraphLinkError` so callers
can catch one type at the run boundary.  Node-level problems reported by the
execution service are *not* exceptions: they travel inside a successful
``RunResult`` as ``issues``.
"""

from __future__ import annotations

UNTRUSTED_GRAPH_MESSAGE = "Graph is not trusted."


class GraphLinkError(Exception):
    """Base class for all graphlink errors."""


class TransportError(GraphLinkError):
    """The execution service answered with a non-success HTTP status."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"


class UntrustedGraphError(TransportError):
    """The graph lives in a folder that has not been trusted yet.

    Recoverable: trust the folder and retry.
    """


class JobFailedError(GraphLinkError):
    """An asynchronous job reached the ``FAILED`` terminal state."""

    def __init__(self, job_id: str, detail: str = "Job failed") -> None:
        super().__init__(f"{detail} (job {job_id})")
        self.job_id = job_id


class JobTimeoutError(GraphLinkError):
    """Polling gave up before the job reached a terminal state."""

    def __init__(self, job_id: str, attempts: int, elapsed: float) -> None:
        super().__init__(
            f"Job {job_id} did not finish after {attempts} poll(s) / {elapsed:.1f}s"
        )
        self.job_id = job_id
        self.attempts = attempts
        self.elapsed = elapsed


class ElementNotFoundError(GraphLinkError):
    """A traversal followed a child reference that does not resolve."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Element not found at path {path}")
        self.path = path


class ConfigurationError(GraphLinkError):
    """Model data carries a configuration graphlink cannot interpret."""


class SelectionRuleError(ConfigurationError):
    """A representation carries a selection rule of unknown kind."""


class BlobNotFoundError(GraphLinkError):
    """A linked representation names a blob the model does not hold."""

    def __init__(self, blob_id: str) -> None:
        super().__init__(f"Blob not found: {blob_id}")
        self.blob_id = blob_id
