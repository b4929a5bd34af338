"""httpx-backed implementation of :class:`~mailroute.core.protocols.RoutingProvider`.

This module is the **only** place in the codebase that imports ``httpx``.
Transport and decoding failures are caught here and re-raised as
:class:`~mailroute.exceptions.ProviderCallFailedError` — nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

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
from mailroute.exceptions import ProviderCallFailedError
from mailroute.infra import wire

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT = 30.0


class CloudflareProvider:
    """Concrete :class:`RoutingProvider` for the Cloudflare Email Routing API.

    Usage::

        with CloudflareProvider(credentials) as provider:
            zones = provider.list_zones().result

    The underlying HTTP client is created on first use and released by
    :meth:`close` (or leaving the ``with`` block).
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                headers=self._auth_headers(),
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._credentials.api_token}",
            "X-Auth-Email": self._credentials.email,
            "X-Auth-Key": self._credentials.api_key,
        }

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> CloudflareProvider:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def verify_credentials(self) -> ProviderResponse[TokenVerification]:
        return self._send("GET", "/user/tokens/verify", wire.decode_token_verification)

    def list_zones(self) -> ProviderResponse[list[Zone]]:
        return self._send("GET", "/zones", wire.list_of(wire.decode_zone))

    def get_routing_settings(self, zone_id: str) -> ProviderResponse[RoutingSettings]:
        return self._send(
            "GET",
            f"/zones/{zone_id}/email/routing",
            wire.decode_routing_settings,
        )

    def list_rules(self, zone_id: str) -> ProviderResponse[list[Rule]]:
        return self._send(
            "GET",
            f"/zones/{zone_id}/email/routing/rules",
            wire.list_of(wire.decode_rule),
        )

    def create_rule(
        self,
        zone_id: str,
        request: CreateRuleRequest,
    ) -> ProviderResponse[Rule]:
        return self._send(
            "POST",
            f"/zones/{zone_id}/email/routing/rules",
            wire.decode_rule,
            json=wire.encode_create_request(request),
        )

    def delete_rule(self, zone_id: str, rule_id: str) -> ProviderResponse[None]:
        # The deleted rule echoed back is not needed, only ``success``.
        return self._send(
            "DELETE",
            f"/zones/{zone_id}/email/routing/rules/{rule_id}",
            wire.ignore_result,
        )

    def list_destination_addresses(
        self,
        account_id: str,
    ) -> ProviderResponse[list[Address]]:
        return self._send(
            "GET",
            f"/accounts/{account_id}/email/routing/addresses",
            wire.list_of(wire.decode_address),
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        decode_result: Callable[[object], T],
        **kwargs: Any,
    ) -> ProviderResponse[T]:
        """Send one request and decode the response envelope.

        The body is decoded regardless of HTTP status: Cloudflare reports
        failures inside the envelope (``success=false`` plus ``errors``).
        """
        try:
            response = self._get_client().request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ProviderCallFailedError(
                f"{method} {path} failed: {exc}",
                hint="Check your network connection.",
            ) from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderCallFailedError(
                f"Couldn't parse json response from {method} {path} "
                f"(HTTP {response.status_code})",
            ) from exc

        try:
            return wire.decode_envelope(payload, decode_result)
        except (ValueError, TypeError) as exc:
            raise ProviderCallFailedError(
                f"Unexpected response from {method} {path}: {exc}",
            ) from exc
