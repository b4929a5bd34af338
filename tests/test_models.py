"""Tests for domain models (core/models.py).

All models are frozen dataclasses — these tests verify immutability,
equality semantics, and the distinctions the resolvers rely on.
"""

from __future__ import annotations

import pytest

from mailroute.core.models import (
    CreateRuleRequest,
    Credentials,
    Drop,
    Forward,
    MatchAll,
    MatchLiteral,
    ProviderResponse,
    Rule,
    Worker,
)


class TestVariants:
    def test_drop_instances_are_equal(self) -> None:
        assert Drop() == Drop()

    def test_forward_equality_is_by_destinations(self) -> None:
        assert Forward(("a@x.com",)) == Forward(("a@x.com",))
        assert Forward(("a@x.com",)) != Forward(("b@x.com",))

    def test_forward_and_worker_are_distinct(self) -> None:
        assert Forward(("x",)) != Worker(("x",))

    def test_match_all_and_literal_are_distinct(self) -> None:
        assert MatchAll() != MatchLiteral("*")

    def test_literal_frozen(self) -> None:
        m = MatchLiteral("a@x.com")
        with pytest.raises(AttributeError):
            m.address = "b@x.com"  # type: ignore[misc]


class TestRule:
    def test_defaults(self) -> None:
        rule = Rule(id="r1")
        assert rule.actions == ()
        assert rule.matchers == ()
        assert rule.enabled is True
        assert rule.name is None
        assert rule.priority is None

    def test_absent_and_zero_priority_are_distinguishable(self) -> None:
        assert Rule(id="r1", priority=None) != Rule(id="r1", priority=0)

    def test_frozen(self) -> None:
        rule = Rule(id="r1")
        with pytest.raises(AttributeError):
            rule.enabled = False  # type: ignore[misc]


class TestCreateRuleRequest:
    def test_optional_fields_default_to_none(self) -> None:
        request = CreateRuleRequest(actions=(Drop(),), matchers=(MatchAll(),))
        assert request.enabled is None
        assert request.name is None
        assert request.priority is None


class TestCredentials:
    def test_repr_hides_secrets(self) -> None:
        creds = Credentials(email="me@example.com", api_token="tok-secret", api_key="key-secret")
        text = repr(creds)
        assert "me@example.com" in text
        assert "tok-secret" not in text
        assert "key-secret" not in text


class TestProviderResponse:
    def test_defaults(self) -> None:
        response: ProviderResponse[int] = ProviderResponse(success=False)
        assert response.result is None
        assert response.errors == ()
        assert response.messages == ()
