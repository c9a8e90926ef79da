from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import StreamingResponse

from gateway.context import GatewayContext
from gateway.core.dispatcher import TurnOrchestrator
from gateway.core.errors import GENERIC_ERROR_MESSAGE, GatewayError
from gateway.core.streaming import STREAM_HEADERS, STREAM_MEDIA_TYPE
from gateway.dependencies import get_context
from gateway.schemas import ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat(
    payload: ChatRequest,
    context: GatewayContext = Depends(get_context),
    x_session_id: str | None = Header(default=None),
):
    session_id = payload.id or x_session_id
    try:
        result, iterator = await TurnOrchestrator(context).respond(
            payload.messages, session_id
        )
    except GatewayError:
        raise
    except Exception as exc:
        logger.exception("Route handler error")
        raise GatewayError(
            status_code=500,
            message=GENERIC_ERROR_MESSAGE,
            code="internal_error",
        ) from exc

    headers = dict(STREAM_HEADERS)
    headers["X-Intent"] = result.intent.value
    return StreamingResponse(iterator, media_type=STREAM_MEDIA_TYPE, headers=headers)
