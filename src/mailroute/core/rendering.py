"""Human-readable rendering of domain models.

Every function here returns plain text (no Rich markup) and is fully
deterministic, so the output can be checked verbatim in tests.
"""

from __future__ import annotations

from collections.abc import Iterable

from mailroute.core.models import (
    Address,
    Drop,
    Forward,
    MatchAll,
    MatchLiteral,
    ProviderError,
    RoutingAction,
    RoutingMatcher,
    Rule,
    TokenVerification,
    Worker,
    Zone,
)

_SEPARATOR = ", "


def render_action(action: RoutingAction) -> str:
    if isinstance(action, Drop):
        return "Drop"
    if isinstance(action, Forward):
        return f"Forward to {_SEPARATOR.join(action.destinations)}"
    if isinstance(action, Worker):
        return f"Worker ({_SEPARATOR.join(action.script_names)})"
    raise TypeError(f"Unknown routing action: {action!r}")


def render_matcher(matcher: RoutingMatcher) -> str:
    if isinstance(matcher, MatchAll):
        return "* (catch-all)"
    if isinstance(matcher, MatchLiteral):
        return matcher.address
    raise TypeError(f"Unknown routing matcher: {matcher!r}")


def render_rule(rule: Rule) -> str:
    """Render a rule as ``matchers -> actions (ID: …[, …])``.

    Name, disabled state and priority are only shown when they carry
    information: a non-empty name, ``enabled=False``, a non-zero priority.
    """
    matchers = _SEPARATOR.join(render_matcher(m) for m in rule.matchers)
    actions = _SEPARATOR.join(render_action(a) for a in rule.actions)

    details = [f"ID: {rule.id}"]
    if rule.name:
        details.append(f"Name: {rule.name}")
    if not rule.enabled:
        details.append("Disabled")
    if rule.priority:
        details.append(f"Priority: {rule.priority}")

    return f"{matchers} -> {actions} ({_SEPARATOR.join(details)})"


def render_zone(zone: Zone) -> str:
    return f"{zone.account.name} (id = {zone.id})"


def render_address(address: Address) -> str:
    text = address.email or ""
    if address.id is not None:
        text += f" (id = {address.id})"
    return text


def render_token_verification(token: TokenVerification) -> str:
    expires_on = token.expires_on or "Never"
    return (
        f"Token is valid (id: {token.id}, status: {token.status.value}, "
        f"expires on: {expires_on})"
    )


def render_provider_errors(errors: Iterable[ProviderError], *, indent: int = 0) -> list[str]:
    """Flatten provider errors into lines, nesting each error chain."""
    lines: list[str] = []
    prefix = "  " * indent
    for error in errors:
        lines.append(f"{prefix}[{error.code}] {error.message}")
        lines.extend(render_provider_errors(error.error_chain, indent=indent + 1))
    return lines
