"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
* Sub-commands route to their handlers with parsed arguments.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from mailroute import __version__
from mailroute.cli import exit_codes
from mailroute.cli.app import cli, main
from mailroute.core.models import Drop, Forward, MatchAll, MatchLiteral, ProviderError
from mailroute.exceptions import (
    ConfigError,
    CredentialsInvalidError,
    CredentialsMissingError,
    EnvironmentError,
    MailRouteError,
    NoDestinationAddressError,
    NoZoneAvailableError,
    ProviderCallFailedError,
    RoutingSettingsUnavailableError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            CredentialsMissingError,
            CredentialsInvalidError,
            ConfigError,
            ProviderCallFailedError,
            NoZoneAvailableError,
            NoDestinationAddressError,
            RoutingSettingsUnavailableError,
            EnvironmentError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[MailRouteError]
    ) -> None:
        assert issubclass(exc_class, MailRouteError)

    def test_hint_is_stored(self) -> None:
        err = MailRouteError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_provider_errors_carried(self) -> None:
        errors = (ProviderError(code=1, message="bad"),)
        err = ProviderCallFailedError("failed", errors=errors)
        assert err.errors == errors
        assert err.hint is None


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self) -> None:
        assert main([]) == exit_codes.SUCCESS

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    @patch("mailroute.cli.commands.handle_list_rules", return_value=exit_codes.SUCCESS)
    def test_list(self, mock_handler: object) -> None:
        assert main(["list"]) == exit_codes.SUCCESS

    @patch("mailroute.cli.commands.handle_setup", return_value=exit_codes.SUCCESS)
    def test_setup_arguments(self, mock_handler) -> None:
        main(["setup", "me@example.com", "tok", "key"])
        mock_handler.assert_called_once_with("me@example.com", "tok", "key")

    @patch("mailroute.cli.commands.handle_create_rule", return_value=exit_codes.SUCCESS)
    def test_create_parses_tokens(self, mock_handler) -> None:
        main(["create", "*", "drop", "--name", "n", "--priority", "0"])
        mock_handler.assert_called_once_with(MatchAll(), Drop(), "n", 0)

    @patch("mailroute.cli.commands.handle_create_rule", return_value=exit_codes.SUCCESS)
    def test_create_forward(self, mock_handler) -> None:
        main(["create", "bob", "me@y.com"])
        mock_handler.assert_called_once_with(
            MatchLiteral("bob"), Forward(("me@y.com",)), None, None
        )

    @patch("mailroute.cli.commands.handle_create_rule", return_value=exit_codes.SUCCESS)
    def test_create_without_arguments(self, mock_handler) -> None:
        main(["create"])
        mock_handler.assert_called_once_with(None, None, None, None)

    def test_negative_priority_rejected(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["create", "--priority", "-1"])
        assert exc_info.value.code == 2

    @patch("mailroute.cli.commands.handle_delete_rule", return_value=exit_codes.SUCCESS)
    def test_delete(self, mock_handler) -> None:
        main(["delete", "abc"])
        mock_handler.assert_called_once_with("abc")


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run(self, side_effect: BaseException) -> int:
        with patch("mailroute.cli.app.main", side_effect=side_effect):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        return exc_info.value.code  # type: ignore[return-value]

    def test_known_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = self._run(CredentialsMissingError("No config found.", hint="run setup"))
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "No config found." in err
        assert "run setup" in err

    def test_provider_errors_listed(self, capsys: pytest.CaptureFixture[str]) -> None:
        exc = ProviderCallFailedError(
            "Failed to list zones.",
            errors=(ProviderError(code=9109, message="Invalid access token"),),
        )
        assert self._run(exc) == exit_codes.GENERAL_ERROR
        assert "Invalid access token" in capsys.readouterr().err

    def test_keyboard_interrupt(self) -> None:
        assert self._run(KeyboardInterrupt()) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected(self) -> None:
        assert self._run(RuntimeError("boom")) == exit_codes.UNEXPECTED_ERROR
