"""
Entry point for the embedder REST API.
"""

import logging

import uvicorn

from embedder import create_app
from embedder.core.config.settings import get_settings


logger = logging.getLogger(__name__)

settings = get_settings()

app = create_app(settings)

if __name__ == "__main__":
    logger.info(f"Starting embedder on port {settings.EMBEDDER_APP_PORT}")

    uvicorn.run(
        "run:app",
        host="0.0.0.0",
        port=settings.EMBEDDER_APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,  # logging is configured by init_logging
    )
