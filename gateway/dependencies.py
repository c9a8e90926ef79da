from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from gateway.config import get_settings
from gateway.context import GatewayContext
from gateway.core.errors import GENERIC_ERROR_MESSAGE, GatewayError

logger = logging.getLogger(__name__)


def get_context(request: Request) -> GatewayContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        context = GatewayContext(get_settings())
        request.app.state.context = context
    return context


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def handle_gateway_error(
        request: Request,
        exc: GatewayError,
    ) -> PlainTextResponse:
        logger.warning(
            "%s %s failed with %s (%s)",
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> PlainTextResponse:
        first_error = exc.errors()[0]["msg"] if exc.errors() else "Invalid request"
        logger.warning("Rejected request to %s: %s", request.url.path, first_error)
        return PlainTextResponse("Invalid message format", status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(
        request: Request,
        exc: Exception,
    ) -> PlainTextResponse:
        logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)
