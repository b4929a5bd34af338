"""Custom exception hierarchy for mailroute.

All exceptions that cross layer boundaries must inherit from
:class:`MailRouteError`.  Raw third-party exceptions (e.g. from httpx)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
MailRouteError
├── CredentialsMissingError
├── CredentialsInvalidError
├── ConfigError
├── ProviderCallFailedError
├── NoZoneAvailableError
├── NoDestinationAddressError
├── RoutingSettingsUnavailableError
└── EnvironmentError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailroute.core.models import ProviderError


class MailRouteError(Exception):
    """Base exception for all mailroute errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Credentials / configuration -------------------------------------------

class CredentialsMissingError(MailRouteError):
    """Raised when no stored credentials can be found."""


class CredentialsInvalidError(MailRouteError):
    """Raised when the provider reports the API token as not active."""


class ConfigError(MailRouteError):
    """Raised when the config file cannot be read or written."""


# --- Provider ----------------------------------------------------------------

class ProviderCallFailedError(MailRouteError):
    """Raised when a provider call fails or returns no usable result.

    Carries the provider's structured error list when one was returned.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: tuple[ProviderError, ...] = (),
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.errors: tuple[ProviderError, ...] = errors


# --- Resolution preconditions ------------------------------------------------

class NoZoneAvailableError(MailRouteError):
    """Raised when the account has no zone to operate on."""


class NoDestinationAddressError(MailRouteError):
    """Raised when no destination address can back a default forward action."""


class RoutingSettingsUnavailableError(MailRouteError):
    """Raised when the zone's email-routing settings cannot be fetched."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(MailRouteError):
    """Raised when a required runtime dependency is not available."""
