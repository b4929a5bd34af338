"""Shared pytest fixtures and configuration for the mailroute test suite.

Guidelines
----------
* No internet access in any test.
* The provider is mocked at the protocol boundary, httpx with respx.
* Core tests must be pure — no side effects.
* Config tests use ``tmp_path`` and never touch the real home directory.
"""

from __future__ import annotations

import pytest

from mailroute.core.models import (
    Credentials,
    MatchLiteral,
    Rule,
    Zone,
    ZoneAccount,
)


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the config store at a temp file and clear env overrides."""
    monkeypatch.setenv("MAILROUTE_CONFIG", str(tmp_path / "config.toml"))
    for name in ("MAILROUTE_EMAIL", "MAILROUTE_API_TOKEN", "MAILROUTE_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(email="me@example.com", api_token="tok-123", api_key="key-456")


@pytest.fixture
def zone() -> Zone:
    return Zone(id="zone-1", account=ZoneAccount(id="acct-1", name="Example Account"))


@pytest.fixture
def sample_rules() -> list[Rule]:
    return [
        Rule(id="r1", matchers=(MatchLiteral("a@x.com"),)),
        Rule(id="r2", matchers=(MatchLiteral("b@x.com"),)),
    ]

