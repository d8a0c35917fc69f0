"""
Central logging configuration for the whole project.
Call  init_logging()  *once* early in startup (before anything logs).
"""

import logging
import os
import sys

from loguru import logger

from embedder.core.config.settings import EmbedderSettings


# --------------------------------------------------------------------------- #
# Helper: forward stdlib logging records to Loguru
# --------------------------------------------------------------------------- #
class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(
            depth=6, exception=record.exc_info  # keep caller info accurate
        ).log(level, record.getMessage())


def _patch_stdlib(level: str) -> None:
    logging.root.setLevel(level)
    logging.root.handlers[:] = [_InterceptHandler()]  # replace all handlers
    for noise in ("asyncio", "httpx", "httpcore"):
        logging.getLogger(noise).setLevel(logging.WARNING)


# --------------------------------------------------------------------------- #
# Main entry point
# --------------------------------------------------------------------------- #
def init_logging(settings: EmbedderSettings) -> None:
    JSON_FORMAT = (
        '{{"timestamp":"{time:YYYY-MM-DD HH:mm:ss.SSS}",'
        '"level":"{level}",'
        '"message":{message!r},'
        '"file":"{file.name}","line":{line},"function":"{function}"}}'
    )

    logger.remove()  # drop default stderr sink

    # Human-friendly console
    logger.add(
        sys.stdout,
        level=settings.LOG_LEVEL,
        colorize=True,
        format=(
            "<green>{time:HH:mm:ss.SSS}</green> "
            "<level>{level: <8}</level> "
            "<cyan>{name}</cyan> | "
            "<level>{message}</level>"
        ),
        enqueue=False,
    )

    # Rotating JSON files, only when a log directory is configured
    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)

        logger.add(
            f"{settings.LOG_DIR}/error.log",
            level="ERROR",
            rotation="5 MB",
            retention="14 days",
            compression="zip",
            format=JSON_FORMAT,
            enqueue=False,
        )

        logger.add(
            f"{settings.LOG_DIR}/app.log",
            level="DEBUG",
            rotation="10 MB",
            retention="10 days",
            compression="zip",
            format=JSON_FORMAT,
            enqueue=False,
        )

    # Feed stdlib logging into Loguru
    _patch_stdlib(settings.LOG_LEVEL)

    for name, level in {
        "uvicorn": logging.DEBUG if settings.DEBUG else logging.INFO,
        "uvicorn.error": logging.DEBUG if settings.DEBUG else logging.INFO,
        "uvicorn.access": logging.DEBUG if settings.DEBUG else logging.INFO,
        "sqlalchemy.engine": logging.DEBUG if settings.DEBUG else logging.WARNING,
    }.items():
        logging.getLogger(name).setLevel(level)

    logger.info("Loguru logging configured")
