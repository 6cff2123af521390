"""
Application lifecycle event handlers.

Opens the database (creating tables on first start) and disposes the
connection pool on shutdown.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

from core.config import settings
from db.session import close_db, init_db

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Build the coroutine run before the first request."""

    async def start_app() -> None:
        logger.info("app_starting", app_name=settings.APP_NAME, env=settings.APP_ENV)
        await init_db()
        logger.info("app_started", vote_policy=settings.VOTE_POLICY)

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Build the coroutine run after the last request."""

    async def stop_app() -> None:
        logger.info("app_stopping")
        await close_db()
        logger.info("app_stopped")

    return stop_app
