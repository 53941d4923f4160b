import logging

import structlog

from jobnotify.config import NotifierConfig, Settings, settings
from jobnotify.core.context import Middleware
from jobnotify.middleware.discord import DiscordMiddleware, new_discord

logger = structlog.get_logger()


def configure_logging(s: Settings | None = None):
    s = s or settings
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.dev.ConsoleRenderer()
                if s.APP_ENV == "development"
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, s.LOG_LEVEL.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_middlewares(s: Settings | None = None) -> list[Middleware]:
    """Active notification stages for the job pipeline.

    Stages without configuration are left out entirely.
    """
    s = s or settings
    middlewares: list[Middleware] = []

    discord = new_discord(NotifierConfig.from_settings(s))
    if discord:
        middlewares.append(discord)
        logger.info("middleware.enabled", name="discord", only_on_error=s.DISCORD_ONLY_ON_ERROR)

    return middlewares


async def shutdown(middlewares: list[Middleware]):
    """Close the HTTP clients held by notification stages."""
    for m in middlewares:
        if isinstance(m, DiscordMiddleware):
            await m.shutdown()
    logger.info("app.shutdown")
