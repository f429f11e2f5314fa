"""Centralised settings for graphlink.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

EXECUTION_MODES = ("auto", "sync", "async")


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_int(name: str) -> int | None:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Graph execution service
    # ------------------------------------------------------------------
    service_url: str = field(
        default_factory=lambda: os.environ.get("GRAPH_SERVICE_URL", "http://localhost:55100")
    )
    execution_mode: str = field(
        default_factory=lambda: os.environ.get("GRAPH_EXECUTION_MODE", "auto")
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    auth_token: str = field(
        default_factory=lambda: os.environ.get("GRAPH_AUTH_TOKEN", "")
    )

    # ------------------------------------------------------------------
    # Async job polling
    # ------------------------------------------------------------------
    poll_interval: float = field(
        default_factory=lambda: float(os.environ.get("POLL_INTERVAL", "0.2"))
    )
    poll_max_attempts: int | None = field(
        default_factory=lambda: _env_optional_int("POLL_MAX_ATTEMPTS")
    )
    # Wall-clock deadline in seconds; 0 disables it.
    poll_timeout: float = field(
        default_factory=lambda: float(os.environ.get("POLL_TIMEOUT", "600"))
    )

    # ------------------------------------------------------------------
    # Spatial assembly
    # ------------------------------------------------------------------
    scale_elevation: bool = field(
        default_factory=lambda: _env_bool("SCALE_ELEVATION", "true")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def __post_init__(self) -> None:
        if self.execution_mode not in EXECUTION_MODES:
            raise ValueError(
                f"GRAPH_EXECUTION_MODE must be one of {EXECUTION_MODES}, "
                f"got {self.execution_mode!r}"
            )


# Module-level singleton — import this everywhere:
#   from graphlink.config import settings
settings = Settings()
