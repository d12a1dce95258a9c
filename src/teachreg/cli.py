"""CLI entry point for teachreg."""

from __future__ import annotations

import os
import sys

import click

from teachreg import __version__
from teachreg.config import ConfigError, Settings
from teachreg.logging import setup_logging


def load_settings() -> Settings:
    """Load settings from the environment, exiting on bad configuration."""
    try:
        return Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(__version__)
def main() -> None:
    """teachreg - teacher/student registration service."""
    pass


@main.command()
@click.option("--host", default=None, help="Bind host (default: TEACHREG_HOST or 127.0.0.1)")
@click.option(
    "--port", type=int, default=None, help="Bind port (default: TEACHREG_PORT or 3000)"
)
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy URL or SQLite path (default: TEACHREG_DATABASE_URL)",
)
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
def serve(host: str | None, port: int | None, database_url: str | None, reload: bool) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn  # noqa: PLC0415

    settings = load_settings()
    setup_logging(settings)

    host = host or settings.host
    port = port or settings.port
    if database_url is None:
        database_url = settings.database_url

    click.echo(f"Serving teachreg on http://{host}:{port} (database: {database_url})")
    if reload:
        # Reload needs an import string, so the URL travels through the environment
        os.environ["TEACHREG_DATABASE_URL"] = database_url
        uvicorn.run("teachreg.api.app:app", host=host, port=port, reload=True)
    else:
        from teachreg.api.app import create_app  # noqa: PLC0415

        uvicorn.run(create_app(database_url), host=host, port=port)


@main.command("init-db")
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy URL or SQLite path (default: TEACHREG_DATABASE_URL)",
)
def init_db(database_url: str | None) -> None:
    """Create the teachers, students and registrations tables."""
    from teachreg.registry.database import Database  # noqa: PLC0415

    if database_url is None:
        database_url = load_settings().database_url

    db = Database(database_url)
    try:
        db.create_tables()
    finally:
        db.close()
    click.echo(f"Database initialized: {db.database_url}")


if __name__ == "__main__":
    main()
