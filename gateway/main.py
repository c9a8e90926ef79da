from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from gateway.config import get_settings
from gateway.context import GatewayContext
from gateway.dependencies import register_exception_handlers
from gateway.internal import admin
from gateway.logging_config import configure_logging
from gateway.routers import chat

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, "context", None) is None:
        app.state.context = GatewayContext(get_settings())
    logger.info("Gateway started with tools: %s", ", ".join(app.state.context.registry.names))
    try:
        yield
    finally:
        await app.state.context.aclose()
        app.state.context = None


def create_app(context: GatewayContext | None = None) -> FastAPI:
    settings = context.settings if context is not None else get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="intent-gateway",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.context = context

    register_exception_handlers(app)

    app.include_router(chat.router)
    app.include_router(admin.router)

    return app


app = create_app()
