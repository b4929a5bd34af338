"""mailroute — command-line client for Cloudflare Email Routing rules.

Lists zones and rules, creates forwarding rules from partial input, and
deletes rules by fuzzy identifier.
"""

from mailroute.version import __version__

__all__: list[str] = ["__version__"]
