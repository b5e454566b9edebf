import argparse
import asyncio
import contextlib
import sys
from typing import Iterator

from loguru import logger
import uvicorn

from .connection import DatabaseService
from .core.config import Settings, load_settings
from .core.exceptions import ConfigurationError
from .core.log import configure_logging
from .database import init_db
from .lifecycle import LifecycleManager
from .seed import seed_database
from .server import create_app


class ManagedServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT/SIGTERM to the lifecycle manager.

    Stock uvicorn re-raises a captured signal once it has stopped, which
    would kill the process before the exit status is set.
    """

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


async def serve(settings: Settings, database: DatabaseService) -> int:
    """Probe the database, then serve HTTP until a shutdown signal."""
    lifecycle = LifecycleManager(database)
    app = create_app(settings, database, lifecycle=lifecycle)
    server = ManagedServer(
        uvicorn.Config(
            app,
            host=settings.HOST,
            port=settings.PORT,
            log_config=None,
        )
    )

    def stop_server() -> None:
        server.should_exit = True

    async def body() -> None:
        logger.info(f"Server running on http://{settings.HOST}:{settings.PORT}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        await server.serve()

    return await lifecycle.run(body, on_signal=stop_server)


async def check_db(settings: Settings, database: DatabaseService) -> int:
    """Probe the database and exit."""
    lifecycle = LifecycleManager(database)

    async def body() -> None:
        return None

    return await lifecycle.run(body)


async def seed(settings: Settings, database: DatabaseService, create_tables: bool) -> int:
    """Create tables if asked, then seed the administrator."""
    lifecycle = LifecycleManager(database)

    async def body() -> None:
        if create_tables:
            await init_db(database.engine)
        async with database.session() as session:
            result = await seed_database(session, settings)
        logger.info("Database seed completed successfully!")
        logger.info(f"Administrator: {result.admin_email}")
        logger.info("Next step: log in and create positions and users through the API.")

    return await lifecycle.run(body)


def main() -> None:
    """
    Command-line interface.

    Exits 1 on configuration errors or when the startup database probe fails.
    """
    parser = argparse.ArgumentParser(description="E-Voting administration backend")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the HTTP API")
    subparsers.add_parser("check-db", help="Test the database connection")
    seed_parser = subparsers.add_parser("seed", help="Seed the election administrator")
    seed_parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )

    args = parser.parse_args()

    try:
        settings = load_settings()
        configure_logging(settings.LOG_LEVEL)
        database = DatabaseService.from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        sys.exit(1)

    try:
        if args.command == "serve":
            code = asyncio.run(serve(settings, database))
        elif args.command == "check-db":
            code = asyncio.run(check_db(settings, database))
        else:
            code = asyncio.run(seed(settings, database, args.create_tables))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
