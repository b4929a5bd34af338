"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from mailroute.core.models import (
    Address,
    CreateRuleRequest,
    Credentials,
    ProviderResponse,
    RoutingSettings,
    Rule,
    TokenVerification,
    Zone,
)


class RoutingProvider(Protocol):
    """Contract for email-routing backends.

    Every call returns a :class:`ProviderResponse`.  A response whose
    ``result`` is ``None`` is not an exception at this level; the core
    decides whether the absence is fatal.

    Implementations must map all transport and decoding failures to
    :class:`~mailroute.exceptions.ProviderCallFailedError`.
    """

    def verify_credentials(self) -> ProviderResponse[TokenVerification]:
        ...  # pragma: no cover

    def list_zones(self) -> ProviderResponse[list[Zone]]:
        ...  # pragma: no cover

    def get_routing_settings(self, zone_id: str) -> ProviderResponse[RoutingSettings]:
        ...  # pragma: no cover

    def list_rules(self, zone_id: str) -> ProviderResponse[list[Rule]]:
        ...  # pragma: no cover

    def create_rule(
        self,
        zone_id: str,
        request: CreateRuleRequest,
    ) -> ProviderResponse[Rule]:
        ...  # pragma: no cover

    def delete_rule(self, zone_id: str, rule_id: str) -> ProviderResponse[None]:
        """Delete *rule_id*.  Callers only rely on ``success``."""
        ...  # pragma: no cover

    def list_destination_addresses(
        self,
        account_id: str,
    ) -> ProviderResponse[list[Address]]:
        ...  # pragma: no cover


class CredentialStore(Protocol):
    """Contract for local credential persistence."""

    def load(self) -> Credentials | None:
        """Return stored credentials, or ``None`` when none are configured.

        Raises
        ------
        ConfigError
            When a config file exists but cannot be read.
        """
        ...  # pragma: no cover

    def save(self, credentials: Credentials) -> Path:
        """Persist *credentials* and return the path written to."""
        ...  # pragma: no cover
