from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    role: str
    content: str | list[dict[str, Any]] | None = None

    model_config = ConfigDict(extra="allow")


class ChatRequest(BaseModel):
    messages: list[ChatMessage]
    id: str | None = None

    model_config = ConfigDict(extra="allow")
