"""
Lipa Gateway - Main Application Entry Point

A flexible installment ("Lipa Mdogo Mdogo") payment service: sellers attach
payment plans to products, buyers check out with a deposit and pay the
rest on a schedule.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from src import __version__
from src.core.config import settings
from src.core.logging import setup_logging
from src.core.metrics import get_metrics, get_metrics_content_type
from src.infrastructure.database import db_manager
from src.presentation.api import api_router
from src.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Sets up logging and the database engine on startup and disposes of the
    engine on shutdown. Tables are created automatically only in debug
    mode or on SQLite; production schemas are managed by migrations.
    """
    setup_logging()
    db_manager.init()

    if settings.debug or settings.database_url.startswith("sqlite"):
        await db_manager.create_tables()

    logger = structlog.get_logger(__name__)
    logger.info("application_started", version=__version__)

    yield

    await db_manager.close()
    logger.info("application_stopped")


OPENAPI_TAGS = [
    {"name": "Plans", "description": "Seller plan configuration and schedule previews"},
    {"name": "Orders", "description": "Checkout, payments and reschedules"},
    {"name": "Accounts", "description": "Wallets, financial health and seller analytics"},
    {"name": "Health", "description": "Liveness"},
]

app = FastAPI(
    title="Lipa Gateway",
    description="Flexible installment payment service",
    version=__version__,
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")
