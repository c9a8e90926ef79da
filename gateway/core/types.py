from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

DEFAULT_SESSION_ID = "default"


class Intent(str, Enum):
    BOOK = "book"
    PERSONAL = "personal"
    WEATHER = "weather"
    STOCK = "stock"
    IMAGE = "image"
    NEWS = "news"

    @property
    def uses_tools(self) -> bool:
        return self in TOOL_INTENTS


TOOL_INTENTS = frozenset({Intent.WEATHER, Intent.STOCK, Intent.IMAGE})


class TurnState(str, Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    TOOLS_PENDING = "tools_pending"
    SYNTHESIZING = "synthesizing"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class TurnResult:
    intent: Intent
    content: str
    kind: Literal["text", "image"] = "text"
    image_url: str | None = None
    states: list[TurnState] = field(default_factory=list)
