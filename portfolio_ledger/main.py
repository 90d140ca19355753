"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or prepares the database schema.
"""

import argparse
import logging

import uvicorn

from portfolio_ledger.bootstrap import bootstrap_configure_logging, bootstrap_create_application
from portfolio_ledger.config import config_load_settings
from portfolio_ledger.db import db_create_engine, db_create_schema

logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Portfolio Ledger runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "init-db"),
        help="Runtime command: `api` starts server, `init-db` creates missing tables in the configured database",
        type=str,
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    bootstrap_configure_logging(settings)

    if parsed_arguments.command == "init-db":
        engine = db_create_engine(database_url=settings.database_url)
        db_create_schema(engine)
        logger.info("database schema ready at %s", engine.url.render_as_string(hide_password=True))
        return

    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


if __name__ == "__main__":
    main()
