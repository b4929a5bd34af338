"""Sub-command handlers for the mailroute CLI.

Each handler loads credentials, opens a provider, delegates to
:class:`~mailroute.core.routing_service.RoutingService`, and renders the
outcome.  Handlers return an exit code; known failures are raised as
:class:`~mailroute.exceptions.MailRouteError` for the error boundary in
:mod:`mailroute.cli.app`.

The credential store and provider factory are parameters so tests can
substitute fakes without monkeypatching.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import AbstractContextManager, contextmanager

from mailroute.cli import exit_codes
from mailroute.cli.console import console, err_console, escape
from mailroute.core.models import Credentials, RoutingAction, RoutingMatcher, Zone
from mailroute.core.protocols import CredentialStore, RoutingProvider
from mailroute.core.rendering import (
    render_address,
    render_rule,
    render_token_verification,
    render_zone,
)
from mailroute.core.routing_service import DeleteOutcome, DeleteResolution, RoutingService
from mailroute.exceptions import CredentialsMissingError
from mailroute.infra.cloudflare_provider import CloudflareProvider
from mailroute.infra.config_store import TomlCredentialStore

ProviderFactory = Callable[[Credentials], AbstractContextManager[RoutingProvider]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_credentials(store: CredentialStore) -> Credentials:
    credentials = store.load()
    if credentials is None:
        raise CredentialsMissingError(
            "No config found.",
            hint="Run `mailroute setup <email> <api-token> <api-key>` first.",
        )
    return credentials


@contextmanager
def _open_service(
    store: CredentialStore,
    provider_factory: ProviderFactory,
) -> Iterator[RoutingService]:
    credentials = _load_credentials(store)
    with provider_factory(credentials) as provider:
        yield RoutingService(provider)


def _select_zone(service: RoutingService) -> Zone:
    zone = service.select_zone()
    err_console.print(f"[dim]Selected zone:[/dim] {escape(render_zone(zone))}", soft_wrap=True)
    return zone


def _print_items(title: str, empty: str, lines: Iterable[str]) -> None:
    items = list(lines)
    if not items:
        console.print(empty)
        return
    console.print(f"[bold]{title}:[/bold]")
    for line in items:
        console.print(f"  - {escape(line)}", soft_wrap=True)


def _report_unresolved(resolution: DeleteResolution) -> None:
    shown = escape(resolution.fragment)
    rules = (render_rule(rule) for rule in resolution.candidates)
    if resolution.outcome is DeleteOutcome.AMBIGUOUS_IDENTIFIER:
        _print_items(f"Multiple rules found with identifier {shown}", "", rules)
        console.print("[yellow]Please specify a unique identifier.[/yellow]")
        return
    console.print(f"No rules found with identifier {shown}.")
    _print_items("Available rules", "No rules exist in this zone.", rules)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def handle_setup(
    email: str,
    api_token: str,
    api_key: str,
    *,
    store: CredentialStore | None = None,
    provider_factory: ProviderFactory = CloudflareProvider,
) -> int:
    """Verify the given credentials, then persist them."""
    store = store if store is not None else TomlCredentialStore()
    credentials = Credentials(email=email, api_token=api_token, api_key=api_key)

    err_console.print("Verifying API token…")
    with provider_factory(credentials) as provider:
        token = RoutingService(provider).verify_credentials()
    console.print(f"[green]{escape(render_token_verification(token))}[/green]")

    path = store.save(credentials)
    console.print(f"Config saved at {escape(str(path))}")
    err_console.print("[yellow]Note:[/yellow] credentials are stored in plain text.")
    return exit_codes.SUCCESS


def handle_list_rules(
    *,
    store: CredentialStore | None = None,
    provider_factory: ProviderFactory = CloudflareProvider,
) -> int:
    store = store if store is not None else TomlCredentialStore()
    with _open_service(store, provider_factory) as service:
        zone = _select_zone(service)
        rules = service.list_rules(zone)
    _print_items("Rules", "No rules found.", (render_rule(rule) for rule in rules))
    return exit_codes.SUCCESS


def handle_list_addresses(
    *,
    store: CredentialStore | None = None,
    provider_factory: ProviderFactory = CloudflareProvider,
) -> int:
    store = store if store is not None else TomlCredentialStore()
    with _open_service(store, provider_factory) as service:
        zone = _select_zone(service)
        addresses = service.list_addresses(zone)
    _print_items(
        "Addresses",
        "No addresses found.",
        (render_address(address) for address in addresses),
    )
    return exit_codes.SUCCESS


def handle_list_zones(
    *,
    store: CredentialStore | None = None,
    provider_factory: ProviderFactory = CloudflareProvider,
) -> int:
    store = store if store is not None else TomlCredentialStore()
    with _open_service(store, provider_factory) as service:
        zones = service.list_zones()
    _print_items("Zones", "No zones found.", (render_zone(zone) for zone in zones))
    return exit_codes.SUCCESS


def handle_create_rule(
    matcher: RoutingMatcher | None,
    action: RoutingAction | None,
    name: str | None,
    priority: int | None,
    *,
    store: CredentialStore | None = None,
    provider_factory: ProviderFactory = CloudflareProvider,
) -> int:
    """Complete the partial rule, create it, and echo the stored result."""
    store = store if store is not None else TomlCredentialStore()
    with _open_service(store, provider_factory) as service:
        zone = _select_zone(service)
        resolution = service.resolve_create_request(
            zone,
            matcher=matcher,
            action=action,
            name=name,
            priority=priority,
        )
        if resolution.domain is not None:
            err_console.print(f"Using routing domain: {escape(resolution.domain)}")
        if resolution.generated_local_part is not None:
            err_console.print(
                "No matcher specified. Generated random local part: "
                f"[bold]{resolution.generated_local_part}[/bold]"
            )
        rule = service.create_rule(zone, resolution.request)

    console.print(f"[green]Rule created:[/green] {escape(render_rule(rule))}", soft_wrap=True)
    return exit_codes.SUCCESS


def handle_delete_rule(
    identifier: str,
    *,
    store: CredentialStore | None = None,
    provider_factory: ProviderFactory = CloudflareProvider,
) -> int:
    """Resolve *identifier* to a single rule and delete it.

    Unknown and ambiguous identifiers are reported and leave every rule
    untouched; they are not errors.
    """
    store = store if store is not None else TomlCredentialStore()
    with _open_service(store, provider_factory) as service:
        zone = _select_zone(service)
        resolution = service.resolve_delete_target(zone, identifier)
        rule_id = resolution.rule_id
        if rule_id is None:
            _report_unresolved(resolution)
            return exit_codes.SUCCESS

        if resolution.outcome is DeleteOutcome.ASSUMED_ID:
            err_console.print(
                "[yellow]Fetching rules failed. "
                "Assuming the identifier is an existing rule ID.[/yellow]"
            )
        else:
            console.print(
                f"Found rule: {escape(render_rule(resolution.candidates[0]))}",
                soft_wrap=True,
            )

        deleted = service.delete_rule(zone, rule_id)

    if not deleted:
        err_console.print(f"[bold red]Error:[/bold red] Failed to delete rule {escape(rule_id)}.")
        return exit_codes.GENERAL_ERROR

    console.print("[green]Rule deleted successfully.[/green]")
    return exit_codes.SUCCESS
