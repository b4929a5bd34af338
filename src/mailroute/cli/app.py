"""CLI application entry point and command routing for mailroute.

This module is the **sole error boundary** for the entire application.
It catches :class:`~mailroute.exceptions.MailRouteError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the command
  handlers, which in turn delegate to the core and infrastructure layers.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys

from mailroute.cli import exit_codes
from mailroute.cli.console import configure_logging, err_console, escape
from mailroute.core.parsing import parse_action, parse_matcher
from mailroute.core.rendering import render_provider_errors
from mailroute.exceptions import MailRouteError, ProviderCallFailedError
from mailroute.version import __version__

_ZONE_NOTE = (
    "The last zone returned by Cloudflare is used; "
    "choosing a zone is not supported yet."
)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid priority: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError("priority must not be negative")
    return value


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands:
    * ``setup <email> <api-token> <api-key>``
    * ``list`` / ``addresses`` / ``zones``
    * ``create [matcher] [action] [--name] [--priority]``
    * ``delete <identifier>``
    """
    parser = argparse.ArgumentParser(
        prog="mailroute",
        description="Manage Cloudflare Email Routing rules from the terminal.",
        epilog=_ZONE_NOTE,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log provider calls and resolution steps to stderr.",
    )

    sub = parser.add_subparsers(dest="command", metavar="<command>")

    setup = sub.add_parser("setup", help="Verify and store API credentials.")
    setup.add_argument("email", help="Cloudflare account email.")
    setup.add_argument("api_token", help="API token with Email Routing permissions.")
    setup.add_argument("api_key", help="Global API key.")

    sub.add_parser("list", help="List routing rules, highest priority first.")
    sub.add_parser("addresses", help="List destination addresses.")
    sub.add_parser("zones", help="List zones.")

    create = sub.add_parser(
        "create",
        help="Create a routing rule.",
        description=(
            "Create a routing rule. A bare local part gets the zone's domain "
            "appended; with no matcher a random address is generated. With no "
            "action, mail is forwarded to the last destination address."
        ),
    )
    create.add_argument(
        "matcher",
        nargs="?",
        type=parse_matcher,
        default=None,
        help="Address or local part to match, or '*' for catch-all.",
    )
    create.add_argument(
        "action",
        nargs="?",
        type=parse_action,
        default=None,
        help="Address to forward to, or 'drop'.",
    )
    create.add_argument("--name", default=None, help="Rule name.")
    create.add_argument("--priority", type=_non_negative_int, default=None, help="Rule priority.")

    delete = sub.add_parser(
        "delete",
        help="Delete a rule by ID or matched address fragment.",
    )
    delete.add_argument(
        "identifier",
        help="Case-insensitive fragment of a rule ID or matched address.",
    )

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _dispatch(args: argparse.Namespace) -> int:
    from mailroute.cli import commands

    if args.command == "setup":
        return commands.handle_setup(args.email, args.api_token, args.api_key)
    if args.command == "list":
        return commands.handle_list_rules()
    if args.command == "addresses":
        return commands.handle_list_addresses()
    if args.command == "zones":
        return commands.handle_list_zones()
    if args.command == "create":
        return commands.handle_create_rule(
            args.matcher,
            args.action,
            args.name,
            args.priority,
        )
    if args.command == "delete":
        return commands.handle_delete_rule(args.identifier)
    raise ValueError(f"Unknown command: {args.command}")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the mailroute CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    return _dispatch(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _report_error(exc: MailRouteError) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    if isinstance(exc, ProviderCallFailedError):
        for line in render_provider_errors(exc.errors, indent=1):
            err_console.print(escape(line))
    if exc.hint:
        err_console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except MailRouteError as exc:
        _report_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        err_console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
