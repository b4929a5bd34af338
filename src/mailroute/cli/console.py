"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from mailroute.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = False) -> Any:
	"""Create a Rich console instance targeting stdout or stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


def escape(text: str) -> str:
	"""Escape Rich markup in provider-supplied text, when Rich is present."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	def print(self, *objects: object, **kwargs: Any) -> None:
		"""Render with Rich when available, else plain print.

		Keyword options such as ``soft_wrap`` are Rich-only and dropped in
		the plain fallback.
		"""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			print(*objects, file=sys.stderr if self._stderr else sys.stdout)
			return
		rich_console.print(*objects, **kwargs)


console = _ConsoleProxy(stderr=False)
"""Command results (rule lists, confirmations)."""

err_console = _ConsoleProxy(stderr=True)
"""Errors, hints and progress notes."""


def configure_logging(verbose: bool) -> None:
	"""Route log records to stderr, through Rich when it is installed."""
	level = logging.DEBUG if verbose else logging.WARNING
	# httpx logs every request at INFO; keep it quiet unless asked.
	logging.getLogger("httpx").setLevel(level)
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError:
		logging.basicConfig(
			level=level,
			format="%(levelname)s %(name)s: %(message)s",
			stream=sys.stderr,
			force=True,
		)
		return
	logging.basicConfig(
		level=level,
		format="%(message)s",
		handlers=[RichHandler(console=get_rich_console(stderr=True), show_path=False)],
		force=True,
	)
