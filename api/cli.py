"""
Command-line entry point: `sqlite-rest --db path/to/file.db`.

Flags override the SQLITE_REST_* environment variables.
"""

from __future__ import annotations

import dataclasses
import logging

import click
import uvicorn

from core import log
from core import settings as settings_module
from main import create_app

logger = logging.getLogger(__name__)


@click.command()
@click.option("--db", "database_path", default=None, help="Path to SQLite database file (required).")
@click.option("--port", type=int, default=None, help="Port to run the server on [default: 8080].")
@click.option("--host", default=None, help="Host address to bind to [default: 0.0.0.0].")
@click.option(
    "--mode",
    type=click.Choice(settings_module.MODES),
    default=None,
    help="Server mode [default: release].",
)
@click.option("--username", default=None, help="Basic auth username.")
@click.option("--password", default=None, help="Basic auth password.")
@click.option("--pool-size", type=int, default=None, help="Number of database connections [default: 4].")
@click.option(
    "--shutdown-grace",
    "shutdown_grace_s",
    type=int,
    default=None,
    help="Seconds in-flight requests get to finish on shutdown [default: 5].",
)
def main(**overrides) -> None:
    """Serve every table of a SQLite database as read-only JSON endpoints."""
    given = {key: value for key, value in overrides.items() if value is not None}
    app_settings = dataclasses.replace(settings_module.load_settings(), **given)
    try:
        settings_module.validate_settings(app_settings)
    except settings_module.SettingsError as exc:
        raise click.UsageError(f"Configuration error: {exc}") from exc

    level = log.level_for_mode(app_settings.mode)
    log.configure_logging(level)

    uvicorn.run(
        create_app(app_settings),
        host=app_settings.host,
        port=app_settings.port,
        log_level=level.lower(),
        timeout_graceful_shutdown=app_settings.shutdown_grace_s,
    )
    logger.info("Server exited")


if __name__ == "__main__":
    main()
