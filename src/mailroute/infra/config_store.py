"""Infrastructure: credential persistence in a TOML config file.

Location
--------
``$MAILROUTE_CONFIG`` when set, otherwise ``mailroute/config.toml`` under
the platform's per-user config directory.

Environment overrides
---------------------
``MAILROUTE_EMAIL``, ``MAILROUTE_API_TOKEN`` and ``MAILROUTE_API_KEY``
override the matching field from the file.  Credentials are returned
only when all three fields end up set.

Rules
-----
* No ``print()`` — callers handle user-facing output.
* Secrets are written with owner-only permissions.
"""

from __future__ import annotations

import logging
import os
import platform
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ValidationError

from mailroute.core.models import Credentials
from mailroute.exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "mailroute"
CONFIG_FILE_NAME = "config.toml"
CONFIG_FILE_MODE = 0o600

CONFIG_PATH_ENV = "MAILROUTE_CONFIG"
ENV_OVERRIDES: dict[str, str] = {
    "email": "MAILROUTE_EMAIL",
    "api_token": "MAILROUTE_API_TOKEN",
    "api_key": "MAILROUTE_API_KEY",
}


class StoredCredentials(BaseModel):
    """On-disk shape of the config file."""

    email: str | None = None
    api_token: str | None = None
    api_key: str | None = None


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

def _platform_config_dir() -> Path:
    """Return the per-user config directory for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    if system == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


def get_config_path() -> Path:
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return _platform_config_dir() / APP_NAME / CONFIG_FILE_NAME


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class TomlCredentialStore:
    """Concrete :class:`~mailroute.core.protocols.CredentialStore`.

    Parameters
    ----------
    path:
        Explicit config file path.  Defaults to :func:`get_config_path`,
        evaluated on every call so environment changes are honoured.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else get_config_path()

    def load(self) -> Credentials | None:
        stored = self._read_file()
        values = stored.model_dump()
        for field_name, env_name in ENV_OVERRIDES.items():
            override = os.environ.get(env_name)
            if override:
                values[field_name] = override

        if not all(values.values()):
            return None
        return Credentials(
            email=values["email"],
            api_token=values["api_token"],
            api_key=values["api_key"],
        )

    def save(self, credentials: Credentials) -> Path:
        path = self.path
        stored = StoredCredentials(
            email=credentials.email,
            api_token=credentials.api_token,
            api_key=credentials.api_key,
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                tomli_w.dump(stored.model_dump(exclude_none=True), f)
            # O_CREAT's mode only applies to new files.
            path.chmod(CONFIG_FILE_MODE)
        except OSError as exc:
            raise ConfigError(f"Failed to write config at {path}: {exc}") from exc
        logger.debug("Saved credentials to %s", path)
        return path

    def _read_file(self) -> StoredCredentials:
        path = self.path
        if not path.is_file():
            logger.debug("No config file at %s", path)
            return StoredCredentials()

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(
                f"Failed to read config at {path}: {exc}",
                hint="Fix or delete the file, then run setup again.",
            ) from exc

        try:
            return StoredCredentials.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid config at {path}",
                hint="Fix or delete the file, then run setup again.",
            ) from exc
