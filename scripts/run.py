#!/usr/bin/env python3
"""Run the shift scheduling API with Uvicorn, configured from APP_* variables."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

logger = logging.getLogger(__name__)


def server_options() -> dict:
    return {
        "host": os.getenv("APP_HOST", "127.0.0.1"),
        "port": int(os.getenv("APP_PORT", "8000")),
        "reload": os.getenv("APP_RELOAD", "false").lower() in ("true", "1", "t"),
        "log_level": os.getenv("APP_LOG_LEVEL", "info"),
    }


if __name__ == "__main__":
    load_dotenv(os.path.join(PROJECT_ROOT, ".env"))
    logging.basicConfig(level=logging.INFO)

    options = server_options()
    logger.info(
        "Serving shift scheduler on %s:%s (reload=%s)",
        options["host"],
        options["port"],
        options["reload"],
    )
    uvicorn.run("main:app", app_dir=PROJECT_ROOT, reload_dirs=[PROJECT_ROOT], **options)
