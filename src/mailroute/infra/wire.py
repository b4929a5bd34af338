"""JSON wire codec for the Cloudflare v4 API.

Converts between the provider's JSON documents and the domain models in
:mod:`mailroute.core.models`.  This module is the **only** place that
knows about the tagged-union encoding of actions and matchers:

* Actions and matchers are objects discriminated by a ``type`` field.
* Literal matchers are written with an extra ``"field": "to"`` entry.
  The entry is injected on output only and never read back.

Decoders raise :class:`WireFormatError` on malformed input; the provider
adapter turns that into a :class:`~mailroute.exceptions.ProviderCallFailedError`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from mailroute.core.models import (
    Address,
    CreateRuleRequest,
    Drop,
    Forward,
    MatchAll,
    MatchLiteral,
    ProviderError,
    ProviderMessage,
    ProviderResponse,
    RoutingAction,
    RoutingMatcher,
    RoutingSettings,
    RoutingStatus,
    Rule,
    TokenStatus,
    TokenVerification,
    Worker,
    Zone,
    ZoneAccount,
)

T = TypeVar("T")

LITERAL_MATCHER_FIELD = "to"


class WireFormatError(ValueError):
    """Raised when a provider document does not have the expected shape."""


# ---------------------------------------------------------------------------
# Encoding (domain → JSON)
# ---------------------------------------------------------------------------

def encode_action(action: RoutingAction) -> dict[str, Any]:
    if isinstance(action, Drop):
        return {"type": "drop"}
    if isinstance(action, Forward):
        return {"type": "forward", "value": list(action.destinations)}
    if isinstance(action, Worker):
        return {"type": "worker", "value": list(action.script_names)}
    raise TypeError(f"Unknown routing action: {action!r}")


def encode_matcher(matcher: RoutingMatcher) -> dict[str, Any]:
    if isinstance(matcher, MatchAll):
        return {"type": "all"}
    if isinstance(matcher, MatchLiteral):
        return {
            "type": "literal",
            "field": LITERAL_MATCHER_FIELD,
            "value": matcher.address,
        }
    raise TypeError(f"Unknown routing matcher: {matcher!r}")


def encode_create_request(request: CreateRuleRequest) -> dict[str, Any]:
    """Encode a create request, omitting optional fields that are ``None``."""
    body: dict[str, Any] = {
        "actions": [encode_action(a) for a in request.actions],
        "matchers": [encode_matcher(m) for m in request.matchers],
    }
    if request.enabled is not None:
        body["enabled"] = request.enabled
    if request.name is not None:
        body["name"] = request.name
    if request.priority is not None:
        body["priority"] = request.priority
    return body


# ---------------------------------------------------------------------------
# Decoding (JSON → domain)
# ---------------------------------------------------------------------------

def _expect_dict(raw: object, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise WireFormatError(f"Expected an object for {what}, got {type(raw).__name__}")
    return raw


def _expect_list(raw: object, what: str) -> list[Any]:
    if not isinstance(raw, list):
        raise WireFormatError(f"Expected a list for {what}, got {type(raw).__name__}")
    return raw


def _require(raw: dict[str, Any], key: str, what: str) -> Any:
    try:
        return raw[key]
    except KeyError:
        raise WireFormatError(f"Missing '{key}' in {what}") from None


def _optional_str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    return None if value is None else str(value)


def _strings(raw: object, what: str) -> tuple[str, ...]:
    return tuple(str(item) for item in _expect_list(raw, what))


def decode_action(raw: object) -> RoutingAction:
    data = _expect_dict(raw, "action")
    kind = _require(data, "type", "action")
    if kind == "drop":
        return Drop()
    if kind == "forward":
        return Forward(destinations=_strings(data.get("value", []), "forward action value"))
    if kind == "worker":
        return Worker(script_names=_strings(data.get("value", []), "worker action value"))
    raise WireFormatError(f"Unknown action type: {kind!r}")


def decode_matcher(raw: object) -> RoutingMatcher:
    data = _expect_dict(raw, "matcher")
    kind = _require(data, "type", "matcher")
    if kind == "all":
        return MatchAll()
    if kind == "literal":
        return MatchLiteral(address=str(_require(data, "value", "literal matcher")))
    raise WireFormatError(f"Unknown matcher type: {kind!r}")


def decode_rule(raw: object) -> Rule:
    data = _expect_dict(raw, "rule")
    priority = data.get("priority")
    if priority is not None and (isinstance(priority, bool) or not isinstance(priority, int)):
        raise WireFormatError(f"Invalid rule priority: {priority!r}")
    return Rule(
        id=str(_require(data, "id", "rule")),
        actions=tuple(decode_action(a) for a in _expect_list(data.get("actions") or [], "actions")),
        matchers=tuple(
            decode_matcher(m) for m in _expect_list(data.get("matchers") or [], "matchers")
        ),
        enabled=bool(_require(data, "enabled", "rule")),
        name=_optional_str(data, "name"),
        priority=priority,
    )


def decode_zone(raw: object) -> Zone:
    data = _expect_dict(raw, "zone")
    account = _expect_dict(_require(data, "account", "zone"), "zone account")
    return Zone(
        id=str(_require(data, "id", "zone")),
        account=ZoneAccount(
            id=str(_require(account, "id", "zone account")),
            name=str(_require(account, "name", "zone account")),
        ),
    )


def decode_address(raw: object) -> Address:
    data = _expect_dict(raw, "address")
    return Address(
        id=_optional_str(data, "id"),
        email=_optional_str(data, "email"),
        created=_optional_str(data, "created"),
        modified=_optional_str(data, "modified"),
        tag=_optional_str(data, "tag"),
        verified=_optional_str(data, "verified"),
    )


def decode_routing_settings(raw: object) -> RoutingSettings:
    data = _expect_dict(raw, "routing settings")
    raw_status = data.get("status")
    try:
        status = RoutingStatus(raw_status) if raw_status is not None else None
    except ValueError:
        status = None
    return RoutingSettings(
        id=str(_require(data, "id", "routing settings")),
        enabled=bool(_require(data, "enabled", "routing settings")),
        name=str(_require(data, "name", "routing settings")),
        created=_optional_str(data, "created"),
        modified=_optional_str(data, "modified"),
        status=status,
    )


def decode_token_verification(raw: object) -> TokenVerification:
    data = _expect_dict(raw, "token verification")
    raw_status = _require(data, "status", "token verification")
    try:
        status = TokenStatus(raw_status)
    except ValueError:
        raise WireFormatError(f"Unknown token status: {raw_status!r}") from None
    return TokenVerification(
        id=str(_require(data, "id", "token verification")),
        status=status,
        expires_on=_optional_str(data, "expires_on"),
        not_before=_optional_str(data, "not_before"),
    )


def list_of(decode: Callable[[object], T]) -> Callable[[object], list[T]]:
    """Lift an item decoder to a decoder of JSON arrays."""

    def _decode_list(raw: object) -> list[T]:
        return [decode(item) for item in _expect_list(raw, "result")]

    return _decode_list


def ignore_result(raw: object) -> None:
    """Decoder for calls whose result payload is not used."""
    return None


def decode_error(raw: object) -> ProviderError:
    data = _expect_dict(raw, "error")
    return ProviderError(
        code=int(data.get("code", 0)),
        message=str(data.get("message", "")),
        error_chain=tuple(
            decode_error(e) for e in _expect_list(data.get("error_chain") or [], "error_chain")
        ),
    )


def decode_message(raw: object) -> ProviderMessage:
    data = _expect_dict(raw, "message")
    return ProviderMessage(code=int(data.get("code", 0)), message=str(data.get("message", "")))


def decode_envelope(
    payload: object,
    decode_result: Callable[[object], T],
) -> ProviderResponse[T]:
    """Decode the ``{success, errors, messages, result}`` response envelope.

    A missing or ``null`` result decodes to ``None`` rather than failing,
    so callers can tell "no result" apart from "malformed result".
    """
    data = _expect_dict(payload, "response")
    success = _require(data, "success", "response")
    if not isinstance(success, bool):
        raise WireFormatError(f"Invalid 'success' flag: {success!r}")

    raw_result = data.get("result")
    return ProviderResponse(
        success=success,
        result=decode_result(raw_result) if raw_result is not None else None,
        errors=tuple(decode_error(e) for e in _expect_list(data.get("errors") or [], "errors")),
        messages=tuple(
            decode_message(m) for m in _expect_list(data.get("messages") or [], "messages")
        ),
    )
