"""Core / service layer — domain model, rule resolution and rendering.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O except through injected protocols.
* No imports from ``cli`` or ``infra``.
"""

from mailroute.core.models import (
    Address,
    CreateRuleRequest,
    Credentials,
    Drop,
    Forward,
    MatchAll,
    MatchLiteral,
    ProviderResponse,
    RoutingAction,
    RoutingMatcher,
    RoutingSettings,
    Rule,
    TokenVerification,
    Worker,
    Zone,
    ZoneAccount,
)
from mailroute.core.protocols import CredentialStore, RoutingProvider
from mailroute.core.routing_service import (
    CreateResolution,
    DeleteOutcome,
    DeleteResolution,
    RoutingService,
)

__all__: list[str] = [
    "Address",
    "CreateResolution",
    "CreateRuleRequest",
    "CredentialStore",
    "Credentials",
    "DeleteOutcome",
    "DeleteResolution",
    "Drop",
    "Forward",
    "MatchAll",
    "MatchLiteral",
    "ProviderResponse",
    "RoutingAction",
    "RoutingMatcher",
    "RoutingProvider",
    "RoutingService",
    "RoutingSettings",
    "Rule",
    "TokenVerification",
    "Worker",
    "Zone",
    "ZoneAccount",
]
