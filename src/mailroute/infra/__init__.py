"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Cloudflare API and the local
config file.  Every raw third-party exception must be caught here and
re-raised as a :class:`~mailroute.exceptions.MailRouteError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from mailroute.infra.cloudflare_provider import CloudflareProvider
from mailroute.infra.config_store import TomlCredentialStore, get_config_path

__all__: list[str] = [
    "CloudflareProvider",
    "TomlCredentialStore",
    "get_config_path",
]
