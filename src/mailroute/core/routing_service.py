"""Core routing service — zone selection and rule resolution.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~mailroute.core.protocols.RoutingProvider` injected
at construction time (dependency inversion), keeping the core free of
any HTTP or wire-format imports.

Responsibilities
----------------
* Pick the working zone from the provider's zone list.
* Complete partial user input into a full :class:`CreateRuleRequest`.
* Resolve a fuzzy identifier to exactly one rule before deletion.

Guarantees
----------
* Provider calls are made strictly one after another.
* No ``print()``; the CLI layer renders every outcome.
* Only :class:`~mailroute.exceptions.MailRouteError` subclasses escape.
"""

from __future__ import annotations

import logging
import random
import secrets
import string
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from mailroute.core.models import (
    Address,
    CreateRuleRequest,
    Forward,
    MatchAll,
    MatchLiteral,
    ProviderResponse,
    RoutingAction,
    RoutingMatcher,
    Rule,
    TokenStatus,
    TokenVerification,
    Zone,
)
from mailroute.core.protocols import RoutingProvider
from mailroute.core.rule_matching import find_matching_rules, sort_by_priority
from mailroute.exceptions import (
    CredentialsInvalidError,
    MailRouteError,
    NoDestinationAddressError,
    NoZoneAvailableError,
    ProviderCallFailedError,
    RoutingSettingsUnavailableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOCAL_PART_ALPHABET = string.ascii_lowercase + string.digits
LOCAL_PART_LENGTH = 16


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def select_zone(zones: Sequence[Zone]) -> Zone:
    """Pick the zone to operate on: the **last** one listed.

    This is a simplification, not a ranking.

    Raises
    ------
    NoZoneAvailableError
        If *zones* is empty.
    """
    if not zones:
        raise NoZoneAvailableError(
            "No zone found for this account.",
            hint="Add a domain to your Cloudflare account first.",
        )
    return zones[-1]


def generate_local_part(rng: random.Random | None = None) -> str:
    """Return 16 characters drawn uniformly, with replacement, from ``[a-z0-9]``."""
    chooser = rng if rng is not None else secrets.SystemRandom()
    return "".join(chooser.choice(LOCAL_PART_ALPHABET) for _ in range(LOCAL_PART_LENGTH))


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CreateResolution:
    """A fully-specified create request plus what had to be synthesized."""

    request: CreateRuleRequest

    generated_local_part: str | None = None
    """Random local-part, when no matcher was supplied."""

    domain: str | None = None
    """Routing domain, when it had to be looked up."""


class DeleteOutcome(Enum):
    UNIQUE_MATCH = "unique_match"
    AMBIGUOUS_IDENTIFIER = "ambiguous_identifier"
    IDENTIFIER_NOT_FOUND = "identifier_not_found"
    ASSUMED_ID = "assumed_id"
    """Rules could not be listed; the fragment is taken as a literal rule ID."""


@dataclass(frozen=True, slots=True)
class DeleteResolution:
    """Outcome of resolving a fuzzy identifier.

    ``candidates`` holds the matching rules for ``UNIQUE_MATCH`` and
    ``AMBIGUOUS_IDENTIFIER``, and every known rule for
    ``IDENTIFIER_NOT_FOUND`` so the user can retry.
    ``rule_id`` is set exactly when a rule should be deleted.
    """

    outcome: DeleteOutcome
    fragment: str
    rule_id: str | None = None
    candidates: tuple[Rule, ...] = field(default=())


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class RoutingService:
    """Stateless service orchestrating provider calls for each command.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`RoutingProvider` protocol.
    rng:
        Optional random source for local-part generation.  Defaults to
        the OS CSPRNG.
    """

    def __init__(
        self,
        provider: RoutingProvider,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._provider: RoutingProvider = provider
        self._rng: random.Random | None = rng

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def verify_credentials(self) -> TokenVerification:
        """Verify the API token and require it to be active.

        Raises
        ------
        ProviderCallFailedError
            If the provider returns no verification result.
        CredentialsInvalidError
            If the token is disabled or expired.
        """
        response = self._call(self._provider.verify_credentials)
        token = self._require_result(response, "Failed to verify token")
        if token.status is not TokenStatus.ACTIVE:
            raise CredentialsInvalidError(
                f"Token is not active (id: {token.id}, status: {token.status.value})",
                hint="Create a new API token and run setup again.",
            )
        return token

    # ------------------------------------------------------------------
    # Zones and listing
    # ------------------------------------------------------------------

    def list_zones(self) -> list[Zone]:
        response = self._call(self._provider.list_zones)
        return list(self._require_result(response, "Failed to list zones"))

    def select_zone(self) -> Zone:
        """Fetch zones and select the working one (see :func:`select_zone`)."""
        zone = select_zone(self.list_zones())
        logger.debug("Selected zone %s (account %s)", zone.id, zone.account.id)
        return zone

    def list_rules(self, zone: Zone) -> list[Rule]:
        """Return the zone's rules, highest priority first."""
        response = self._call(self._provider.list_rules, zone.id)
        return sort_by_priority(self._require_result(response, "Failed to list rules"))

    def list_addresses(self, zone: Zone) -> list[Address]:
        response = self._call(self._provider.list_destination_addresses, zone.account.id)
        return list(self._require_result(response, "Failed to list addresses"))

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def resolve_create_request(
        self,
        zone: Zone,
        matcher: RoutingMatcher | None = None,
        action: RoutingAction | None = None,
        name: str | None = None,
        priority: int | None = None,
    ) -> CreateResolution:
        """Fill in any missing piece of a rule and build the create request.

        * A missing action forwards to the account's last destination
          address.
        * A bare local-part matcher gets the zone's routing domain appended.
        * A missing matcher becomes a random local-part at that domain.

        Raises
        ------
        NoDestinationAddressError
            If no action was given and no usable destination exists.
        RoutingSettingsUnavailableError
            If the routing domain is needed but cannot be fetched.
        """
        resolved_action = action if action is not None else self._default_action(zone)

        generated: str | None = None
        domain: str | None = None
        if matcher is None:
            domain = self._routing_domain(zone)
            generated = generate_local_part(self._rng)
            logger.info("No matcher given; generated local part %s", generated)
            resolved_matcher: RoutingMatcher = MatchLiteral(address=f"{generated}@{domain}")
        elif isinstance(matcher, MatchAll) or "@" in matcher.address:
            resolved_matcher = matcher
        else:
            domain = self._routing_domain(zone)
            resolved_matcher = MatchLiteral(address=f"{matcher.address}@{domain}")

        request = CreateRuleRequest(
            actions=(resolved_action,),
            matchers=(resolved_matcher,),
            enabled=None,
            name=name,
            priority=priority,
        )
        return CreateResolution(request=request, generated_local_part=generated, domain=domain)

    def create_rule(self, zone: Zone, request: CreateRuleRequest) -> Rule:
        response = self._call(self._provider.create_rule, zone.id, request)
        return self._require_result(response, "Failed to create rule")

    def _default_action(self, zone: Zone) -> RoutingAction:
        addresses = self.list_addresses(zone)
        if not addresses:
            raise NoDestinationAddressError(
                "No addresses found to forward to.",
                hint="Create a destination address or pass an action explicitly.",
            )
        address = addresses[-1]
        if not address.email:
            raise NoDestinationAddressError(f"Address {address.id or '<unknown>'} has no email.")
        logger.debug("No action given; forwarding to %s", address.email)
        return Forward(destinations=(address.email,))

    def _routing_domain(self, zone: Zone) -> str:
        response = self._call(self._provider.get_routing_settings, zone.id)
        if response.result is None:
            raise RoutingSettingsUnavailableError(
                "Failed to get email routing settings.",
                hint="Make sure Email Routing is enabled for this zone.",
            )
        logger.debug("Routing domain for zone %s is %s", zone.id, response.result.name)
        return response.result.name

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def resolve_delete_target(self, zone: Zone, fragment: str) -> DeleteResolution:
        """Resolve *fragment* against the zone's rules.

        When the rules cannot be listed, the fragment is assumed to be a
        literal rule ID.  Otherwise exactly one matching rule is required;
        zero or several matches are reported without deleting anything.
        """
        response = self._call(self._provider.list_rules, zone.id)
        if response.result is None:
            logger.warning("Could not list rules; assuming %r is a rule ID", fragment)
            return DeleteResolution(
                outcome=DeleteOutcome.ASSUMED_ID,
                fragment=fragment,
                rule_id=fragment,
            )

        rules = list(response.result)
        matched = find_matching_rules(fragment, rules)

        if not matched:
            return DeleteResolution(
                outcome=DeleteOutcome.IDENTIFIER_NOT_FOUND,
                fragment=fragment,
                candidates=tuple(rules),
            )
        if len(matched) > 1:
            return DeleteResolution(
                outcome=DeleteOutcome.AMBIGUOUS_IDENTIFIER,
                fragment=fragment,
                candidates=tuple(matched),
            )
        return DeleteResolution(
            outcome=DeleteOutcome.UNIQUE_MATCH,
            fragment=fragment,
            rule_id=matched[0].id,
            candidates=(matched[0],),
        )

    def delete_rule(self, zone: Zone, rule_id: str) -> bool:
        """Delete *rule_id* and return the provider's ``success`` flag."""
        response = self._call(self._provider.delete_rule, zone.id, rule_id)
        if not response.success:
            logger.warning("Provider refused to delete rule %s", rule_id)
        return response.success

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    def _call(method: Callable[..., ProviderResponse[T]], *args: object) -> ProviderResponse[T]:
        """Call the provider and ensure only our exceptions escape."""
        try:
            return method(*args)
        except MailRouteError:
            raise
        except Exception as exc:
            raise ProviderCallFailedError(
                f"Unexpected provider error: {exc}",
            ) from exc

    @staticmethod
    def _require_result(response: ProviderResponse[T], message: str) -> T:
        if response.result is None:
            raise ProviderCallFailedError(f"{message}.", errors=response.errors)
        return response.result
