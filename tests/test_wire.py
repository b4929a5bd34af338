"""Tests for the JSON wire codec (infra/wire.py)."""

from __future__ import annotations

from typing import Any

import pytest

from mailroute.core.models import (
    CreateRuleRequest,
    Drop,
    Forward,
    MatchAll,
    MatchLiteral,
    RoutingStatus,
    TokenStatus,
    Worker,
)
from mailroute.infra import wire


class TestEncodeMatcher:
    @pytest.mark.parametrize("value", ["bob@example.com", "bob", ""])
    def test_literal_always_carries_field(self, value: str) -> None:
        assert wire.encode_matcher(MatchLiteral(value)) == {
            "type": "literal",
            "field": "to",
            "value": value,
        }

    def test_catch_all(self) -> None:
        assert wire.encode_matcher(MatchAll()) == {"type": "all"}


class TestEncodeAction:
    def test_drop(self) -> None:
        assert wire.encode_action(Drop()) == {"type": "drop"}

    def test_forward(self) -> None:
        assert wire.encode_action(Forward(("a@x.com", "b@x.com"))) == {
            "type": "forward",
            "value": ["a@x.com", "b@x.com"],
        }

    def test_worker(self) -> None:
        assert wire.encode_action(Worker(("w",))) == {"type": "worker", "value": ["w"]}


class TestEncodeCreateRequest:
    def test_omits_none_fields(self) -> None:
        body = wire.encode_create_request(
            CreateRuleRequest(actions=(Drop(),), matchers=(MatchLiteral("a@x.com"),))
        )
        assert body == {
            "actions": [{"type": "drop"}],
            "matchers": [{"type": "literal", "field": "to", "value": "a@x.com"}],
        }

    def test_keeps_zero_priority_and_name(self) -> None:
        body = wire.encode_create_request(
            CreateRuleRequest(
                actions=(Drop(),),
                matchers=(MatchAll(),),
                name="n",
                priority=0,
                enabled=False,
            )
        )
        assert body["priority"] == 0
        assert body["name"] == "n"
        assert body["enabled"] is False


def _rule_json(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "r1",
        "actions": [{"type": "forward", "value": ["me@y.com"]}],
        "matchers": [{"type": "literal", "field": "to", "value": "a@x.com"}],
        "enabled": True,
        "name": "Rule",
        "priority": 10,
    }
    data.update(overrides)
    return data


class TestDecodeRule:
    def test_full(self) -> None:
        rule = wire.decode_rule(_rule_json())
        assert rule.id == "r1"
        assert rule.actions == (Forward(("me@y.com",)),)
        assert rule.matchers == (MatchLiteral("a@x.com"),)
        assert rule.enabled is True
        assert rule.name == "Rule"
        assert rule.priority == 10

    def test_field_entry_is_ignored(self) -> None:
        raw = _rule_json(matchers=[{"type": "literal", "field": "from", "value": "a@x.com"}])
        assert wire.decode_rule(raw).matchers == (MatchLiteral("a@x.com"),)

    def test_missing_lists_default_empty(self) -> None:
        raw = _rule_json()
        del raw["actions"]
        del raw["matchers"]
        rule = wire.decode_rule(raw)
        assert rule.actions == ()
        assert rule.matchers == ()

    def test_null_name_and_priority(self) -> None:
        rule = wire.decode_rule(_rule_json(name=None, priority=None))
        assert rule.name is None
        assert rule.priority is None

    def test_worker_and_catch_all(self) -> None:
        rule = wire.decode_rule(
            _rule_json(
                actions=[{"type": "worker", "value": ["script"]}, {"type": "drop"}],
                matchers=[{"type": "all"}],
            )
        )
        assert rule.actions == (Worker(("script",)), Drop())
        assert rule.matchers == (MatchAll(),)

    def test_unknown_action_type(self) -> None:
        with pytest.raises(wire.WireFormatError, match="action type"):
            wire.decode_rule(_rule_json(actions=[{"type": "teleport"}]))

    def test_unknown_matcher_type(self) -> None:
        with pytest.raises(wire.WireFormatError, match="matcher type"):
            wire.decode_rule(_rule_json(matchers=[{"type": "regex", "value": ".*"}]))

    def test_missing_id(self) -> None:
        raw = _rule_json()
        del raw["id"]
        with pytest.raises(wire.WireFormatError, match="'id'"):
            wire.decode_rule(raw)

    def test_invalid_priority(self) -> None:
        with pytest.raises(wire.WireFormatError, match="priority"):
            wire.decode_rule(_rule_json(priority="high"))


class TestDecodeOthers:
    def test_zone(self) -> None:
        zone = wire.decode_zone({"id": "z1", "account": {"id": "a1", "name": "Acme"}, "x": 1})
        assert zone.id == "z1"
        assert zone.account.name == "Acme"

    def test_address_all_optional(self) -> None:
        address = wire.decode_address({})
        assert address.id is None
        assert address.email is None

    def test_routing_settings_status(self) -> None:
        settings = wire.decode_routing_settings(
            {"id": "s", "enabled": True, "name": "example.com", "status": "misconfigured/locked"}
        )
        assert settings.name == "example.com"
        assert settings.status is RoutingStatus.MISCONFIGURED_LOCKED

    def test_routing_settings_unknown_status(self) -> None:
        settings = wire.decode_routing_settings(
            {"id": "s", "enabled": True, "name": "example.com", "status": "brand-new"}
        )
        assert settings.status is None

    def test_token_verification(self) -> None:
        token = wire.decode_token_verification({"id": "t", "status": "expired"})
        assert token.status is TokenStatus.EXPIRED
        assert token.expires_on is None

    def test_token_verification_unknown_status(self) -> None:
        with pytest.raises(wire.WireFormatError):
            wire.decode_token_verification({"id": "t", "status": "sleeping"})


class TestDecodeEnvelope:
    def test_success_with_list_result(self) -> None:
        response = wire.decode_envelope(
            {"success": True, "errors": [], "messages": [], "result": [_rule_json()]},
            wire.list_of(wire.decode_rule),
        )
        assert response.success is True
        assert response.result is not None
        assert response.result[0].id == "r1"

    def test_null_result(self) -> None:
        response = wire.decode_envelope(
            {
                "success": False,
                "errors": [
                    {
                        "code": 7003,
                        "message": "Could not route",
                        "error_chain": [{"code": 7000, "message": "No route"}],
                    }
                ],
                "messages": [{"code": 1, "message": "note"}],
                "result": None,
            },
            wire.decode_rule,
        )
        assert response.success is False
        assert response.result is None
        assert response.errors[0].code == 7003
        assert response.errors[0].error_chain[0].message == "No route"
        assert response.messages[0].message == "note"

    def test_missing_optional_lists(self) -> None:
        response = wire.decode_envelope({"success": True}, wire.decode_rule)
        assert response.result is None
        assert response.errors == ()

    def test_missing_success_flag(self) -> None:
        with pytest.raises(wire.WireFormatError, match="success"):
            wire.decode_envelope({"result": None}, wire.decode_rule)

    def test_not_an_object(self) -> None:
        with pytest.raises(wire.WireFormatError):
            wire.decode_envelope(["nope"], wire.decode_rule)

    def test_ignore_result(self) -> None:
        response = wire.decode_envelope({"success": True, "result": {"id": "r1"}}, wire.ignore_result)
        assert response.success is True
        assert response.result is None
