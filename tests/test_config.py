"""Tests for graphlink.config — environment-driven settings."""

from __future__ import annotations

import pytest

from graphlink.config import Settings
from graphlink.execution.polling import PollPolicy


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "GRAPH_SERVICE_URL",
            "GRAPH_EXECUTION_MODE",
            "POLL_MAX_ATTEMPTS",
            "POLL_TIMEOUT",
            "SCALE_ELEVATION",
        ):
            monkeypatch.delenv(name, raising=False)
        s = Settings()
        assert s.service_url == "http://localhost:55100"
        assert s.execution_mode == "auto"
        assert s.poll_max_attempts is None
        assert s.poll_timeout == 600
        assert s.scale_elevation is True

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPH_EXECUTION_MODE", "sync")
        monkeypatch.setenv("POLL_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("SCALE_ELEVATION", "false")
        s = Settings()
        assert s.execution_mode == "sync"
        assert s.poll_max_attempts == 5
        assert s.scale_elevation is False

    def test_invalid_execution_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPH_EXECUTION_MODE", "eventually")
        with pytest.raises(ValueError, match="GRAPH_EXECUTION_MODE"):
            Settings()


class TestPollPolicyFromSettings:
    def test_zero_timeout_disables_deadline(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("graphlink.execution.polling.settings.poll_timeout", 0.0)
        monkeypatch.setattr("graphlink.execution.polling.settings.poll_max_attempts", 3)
        policy = PollPolicy.from_settings()
        assert policy.timeout is None
        assert policy.max_attempts == 3
