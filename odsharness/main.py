"""ODS test harness entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from odsharness.composition import compose
from odsharness.config import HarnessConfig, load_config
from odsharness.context import HarnessContext
from odsharness.db.session import Databases
from odsharness.tasks.runner import run_external_tasks

load_dotenv()

logger = logging.getLogger("odsharness")

# Read by create_app when no path is given (uvicorn --reload workers)
CONFIG_ENV_VAR = "ODSHARNESS_CONFIG"
DEFAULT_CONFIG_PATH = "harness.yaml"


def _setup_logging(config: HarnessConfig):
    log_dir = Path(config.logging.dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.handlers.RotatingFileHandler(
                log_dir / "harness.log", maxBytes=10_000_000, backupCount=5
            ),
        ],
    )


async def prepare(context: HarnessContext) -> list[str]:
    """Create tables, compose services and run every external task."""
    await context.databases.init()
    services = compose(context)
    return await run_external_tasks(services.external_tasks)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """App lifespan: databases, composition, startup tasks.

    Databases passed to :func:`create_app` belong to the caller and are
    left open on shutdown.
    """
    config: HarnessConfig = app.state.config
    _setup_logging(config)
    logger.info("Starting ODS test harness...")

    owns_databases = app.state.databases is None
    databases = app.state.databases or Databases.from_config(config.database)
    try:
        await databases.init()
        logger.info("Databases initialized")

        context = HarnessContext(config=config, databases=databases)
        services = compose(context)
        app.state.context = context
        app.state.services = services

        app.state.completed_tasks = await run_external_tasks(services.external_tasks)
        logger.info("Harness ready")

        yield
    finally:
        if owns_databases:
            await databases.close()
        logger.info("Harness shutdown complete")


def create_app(
    config_path: str | None = None,
    config: HarnessConfig | None = None,
    databases: Databases | None = None,
) -> FastAPI:
    if config is None:
        config_path = config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
        config = load_config(config_path)

    app = FastAPI(title="ODS Test Harness", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.databases = databases
    app.state.services = None
    app.state.context = None
    app.state.completed_tasks = []

    from odsharness.api.routes import router

    app.include_router(router)
    return app


async def _seed(config: HarnessConfig) -> list[str]:
    databases = Databases.from_config(config.database)
    try:
        return await prepare(HarnessContext(config=config, databases=databases))
    finally:
        await databases.close()


def cli():
    parser = argparse.ArgumentParser(prog="odsharness", description="ODS API integration test harness")
    sub = parser.add_subparsers(dest="command")

    serve_parser = sub.add_parser("serve", help="Prepare the databases and start the harness server")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")
    serve_parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)

    seed_parser = sub.add_parser("seed", help="Run the startup tasks once and exit")
    seed_parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)

    args = parser.parse_args()

    if args.command == "serve":
        config = load_config(args.config)
        host = args.host or config.server.host
        port = args.port or config.server.port
        if args.reload or config.server.reload:
            # Reload workers rebuild the app from an import string
            os.environ[CONFIG_ENV_VAR] = str(Path(args.config).resolve())
            uvicorn.run(
                "odsharness.main:create_app",
                factory=True,
                host=host,
                port=port,
                reload=True,
            )
        else:
            uvicorn.run(create_app(config=config), host=host, port=port)
    elif args.command == "seed":
        config = load_config(args.config)
        _setup_logging(config)
        completed = asyncio.run(_seed(config))
        logger.info("Seed complete: %s", ", ".join(completed))
    else:
        parser.print_help()


if __name__ == "__main__":
    cli()
