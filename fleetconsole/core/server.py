#!/usr/bin/env python3
"""
fleetconsole FastAPI application factory

Wires config, database, admin auth, console sessions and background tasks
into a single app. All routers are built by `create_*_routes` factories.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..models import db_manager
from ..console import MockTerminal, ConsoleSessionManager
from ..api.dependencies import AuthDependencies
from ..api.routes.server_routes import create_server_routes
from ..api.routes.file_routes import create_file_routes
from ..api.routes.process_routes import create_process_routes
from ..api.routes.console_routes import create_console_routes
from ..api.routes.admin_routes import create_admin_routes
from ..api.routes.dashboard_routes import create_dashboard_routes
from ..tasks.metric_sampler import metric_sampler_loop
from ..tasks.retention import retention_loop
from .config import ServerConfig, resolve_paths, resolve_admin_token

logger = logging.getLogger("fleetconsole.server")


def create_app(config: ServerConfig) -> FastAPI:
    """Create the FastAPI app for the given configuration."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db_path, _, _, _, _ = resolve_paths(config)
    db_manager.db_path = db_path
    if not db_manager.connect():
        raise RuntimeError(f"database init failed: {db_path}")

    admin_token = resolve_admin_token(config)
    auth_deps = AuthDependencies(admin_token, test_mode=config.test_mode)

    terminal = MockTerminal(delay_min=config.console_delay_min, delay_max=config.console_delay_max)
    sessions = ConsoleSessionManager(terminal, ttl_seconds=config.console_session_ttl)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        tasks = []
        if config.sampler_interval > 0:
            tasks.append(asyncio.create_task(metric_sampler_loop(config.sampler_interval)))
        if config.cleanup_interval > 0:
            tasks.append(asyncio.create_task(retention_loop(
                config.cleanup_interval, config.metrics_days, config.audit_days, sessions,
            )))
        logger.info("fleetconsole server started (test_mode=%s, tasks=%d)", config.test_mode, len(tasks))
        try:
            yield
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            db_manager.close()
            logger.info("fleetconsole server stopped")

    app = FastAPI(title="fleetconsole", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.console_sessions = sessions

    app.include_router(create_server_routes(auth_deps))
    app.include_router(create_file_routes(auth_deps))
    app.include_router(create_process_routes(auth_deps))
    app.include_router(create_console_routes(auth_deps, sessions))
    app.include_router(create_admin_routes(auth_deps))
    app.include_router(create_dashboard_routes(auth_deps, sessions))
    return app
