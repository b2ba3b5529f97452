#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Project Tracker - entry point
Starts the dashboard API over the JSON task store
"""

import argparse
import sys

import uvicorn

from config import get_settings
from utils.logger import setup_logging


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description='Run the Project Tracker dashboard')
    parser.add_argument('--port', type=int, default=settings.DASHBOARD_PORT, help='Server port')
    parser.add_argument('--host', default=settings.DASHBOARD_HOST, help='Server host')
    parser.add_argument('--reload', action='store_true', help='Reload on code changes')
    args = parser.parse_args()

    logger = setup_logging(settings)
    logger.info(f"🚀 {settings.APP_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")
    logger.info(f"📂 Data directory: {settings.DATA_DIR}")
    if settings.DEBUG:
        logger.info(f"📚 API docs: http://{args.host}:{args.port}/api/docs")

    try:
        uvicorn.run(
            "dashboard.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_config=None,
        )
    except KeyboardInterrupt:
        logger.info("👋 Stopped by user")
    except Exception as e:
        logger.error(f"💥 Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
