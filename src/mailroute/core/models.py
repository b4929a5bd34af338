"""Domain models for mailroute.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and know nothing about the provider's wire format.

Routing actions and matchers are tagged variants: each variant is its own
class, and the :data:`RoutingAction` / :data:`RoutingMatcher` unions name
the closed set of alternatives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Routing actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Drop:
    """Discard matching mail."""


@dataclass(frozen=True, slots=True)
class Forward:
    """Forward matching mail to one or more destination addresses."""

    destinations: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Worker:
    """Hand matching mail to one or more worker scripts."""

    script_names: tuple[str, ...]


RoutingAction = Union[Drop, Forward, Worker]


# ---------------------------------------------------------------------------
# Routing matchers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MatchAll:
    """Catch-all matcher."""


@dataclass(frozen=True, slots=True)
class MatchLiteral:
    """Match a single recipient address.

    ``address`` is either a bare local-part or a full ``user@domain``.
    """

    address: str


RoutingMatcher = Union[MatchAll, MatchLiteral]


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Rule:
    """An email routing rule as stored by the provider."""

    id: str
    """Provider-assigned identifier."""

    actions: tuple[RoutingAction, ...] = ()
    matchers: tuple[RoutingMatcher, ...] = ()
    enabled: bool = True

    name: str | None = None

    priority: int | None = None
    """``None`` means provider default; ``0`` is a valid explicit value."""


@dataclass(frozen=True, slots=True)
class CreateRuleRequest:
    """Payload for creating a rule.  ``None`` fields are left to the provider."""

    actions: tuple[RoutingAction, ...]
    matchers: tuple[RoutingMatcher, ...]
    enabled: bool | None = None
    name: str | None = None
    priority: int | None = None


# ---------------------------------------------------------------------------
# Zones, addresses and settings
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ZoneAccount:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Zone:
    id: str
    account: ZoneAccount


@dataclass(frozen=True, slots=True)
class Address:
    """A destination mailbox.  Metadata is carried but never interpreted."""

    id: str | None = None
    email: str | None = None
    created: str | None = None
    modified: str | None = None
    tag: str | None = None
    verified: str | None = None


class RoutingStatus(str, Enum):
    READY = "ready"
    UNCONFIGURED = "unconfigured"
    MISCONFIGURED = "misconfigured"
    MISCONFIGURED_LOCKED = "misconfigured/locked"
    UNLOCKED = "unlocked"


@dataclass(frozen=True, slots=True)
class RoutingSettings:
    """Email-routing settings of a zone; ``name`` is the routing domain."""

    id: str
    enabled: bool
    name: str
    created: str | None = None
    modified: str | None = None
    status: RoutingStatus | None = None


# ---------------------------------------------------------------------------
# Credentials and verification
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Credentials:
    """Opaque credentials passed through to the provider unexamined."""

    email: str
    api_token: str = field(repr=False)
    api_key: str = field(repr=False)


class TokenStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class TokenVerification:
    id: str
    status: TokenStatus
    expires_on: str | None = None
    not_before: str | None = None


# ---------------------------------------------------------------------------
# Provider response envelope
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProviderError:
    """One structured error reported by the provider."""

    code: int
    message: str
    error_chain: tuple[ProviderError, ...] = ()


@dataclass(frozen=True, slots=True)
class ProviderMessage:
    code: int
    message: str


@dataclass(frozen=True, slots=True)
class ProviderResponse(Generic[T]):
    """Result of a single provider call.

    ``result`` is ``None`` when the provider returned nothing usable; the
    ``errors`` tuple then usually explains why.
    """

    success: bool
    result: T | None = None
    errors: tuple[ProviderError, ...] = ()
    messages: tuple[ProviderMessage, ...] = ()
