from __future__ import annotations

from fastapi import APIRouter, Depends

from gateway.context import GatewayContext
from gateway.dependencies import get_context

router = APIRouter(prefix="/internal", tags=["internal"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/capabilities")
async def capabilities(context: GatewayContext = Depends(get_context)) -> dict:
    return {
        "tools": context.registry.names,
        "sessions": len(context.memory),
    }
