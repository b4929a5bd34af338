"""Allow ``python -m mailroute`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m mailroute`` behaves identically to the ``mailroute``
console script.
"""

from __future__ import annotations

from mailroute.cli.app import cli

if __name__ == "__main__":
    cli()
