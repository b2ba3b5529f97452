#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Project Tracker - FastAPI Application
Project board, task actions and statistics over the task store
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from services import close_all_services, get_service_manager
from services.data_service import TaskStore

from .api import projects, stats, tasks

logger = logging.getLogger(__name__)


def create_app(store: Optional[TaskStore] = None) -> FastAPI:
    """Build the dashboard; ``store`` replaces the JSON store from settings"""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Starting {settings.APP_NAME} dashboard...")
        manager = get_service_manager()
        if not manager.initialized:
            if not manager.initialize_services(store):
                logger.error("❌ Services unavailable, API will answer 503")
        logger.info(f"🌐 Dashboard on http://{settings.DASHBOARD_HOST}:{settings.DASHBOARD_PORT}")

        yield

        logger.info("🛑 Stopping dashboard...")
        close_all_services()
        logger.info("✅ Resources released")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Project roll-up board with task actions",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(f"❌ Request failed: {request.method} {request.url.path}: {e} ({process_time:.3f}s)")
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})

        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response

    # ===== ROUTES =====

    app.include_router(projects.router)
    app.include_router(tasks.router)
    app.include_router(stats.router)

    @app.get("/health")
    async def health_check():
        health = get_service_manager().health_check()
        status_code = 200 if health["status"] == "healthy" else 503
        return JSONResponse(status_code=status_code, content=health)

    return app


app = create_app()
