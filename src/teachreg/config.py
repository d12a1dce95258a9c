"""Environment-driven configuration for teachreg."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DATABASE_URL = "teachreg.db"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

ENV_PREFIX = "TEACHREG_"


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _env_value(env: Mapping[str, str], name: str, default: str) -> str:
    # Blank counts as unset
    value = env.get(f"{ENV_PREFIX}{name}", "").strip()
    return value or default


def database_url_from_env(environ: Mapping[str, str] | None = None) -> str:
    """Return ``TEACHREG_DATABASE_URL``, or the default SQLite file.

    Reads nothing else, so it works even when other variables are invalid.
    """
    env = os.environ if environ is None else environ
    return _env_value(env, "DATABASE_URL", DEFAULT_DATABASE_URL)


@dataclass
class Settings:
    """Runtime settings for the service.

    `database_url` is either a SQLAlchemy URL (``mysql+pymysql://...``,
    ``postgresql://...``, ``sqlite:///...``), a plain SQLite file path, or
    ``:memory:``.
    """

    database_url: str = DEFAULT_DATABASE_URL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``TEACHREG_*`` environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Parsed settings, with defaults for unset variables.

        Raises:
            ConfigError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        raw_port = _env_value(env, "PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError as e:
            raise ConfigError(f"Invalid {ENV_PREFIX}PORT: {raw_port!r}") from e
        if not 0 < port < 65536:
            raise ConfigError(f"{ENV_PREFIX}PORT out of range: {port}")

        return cls(
            database_url=database_url_from_env(env),
            host=_env_value(env, "HOST", DEFAULT_HOST),
            port=port,
            log_dir=_env_value(env, "LOG_DIR", DEFAULT_LOG_DIR),
            log_level=_env_value(env, "LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
