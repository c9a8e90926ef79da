"""
Producer side of the incremental text protocol consumed by the chat UI.

Each text part is a line ``0:<json string>`` and the stream ends with a
finish line ``d:{"finishReason": "stop"}``. The producer is an async
generator, so the server only pulls the next chunk when the client is
ready for it; a single-chunk stream is an ordinary instance.
"""

from __future__ import annotations

import json
from typing import AsyncIterator

from .types import TurnResult

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {
    "x-vercel-ai-data-stream": "v1",
    "Cache-Control": "no-cache",
}


def text_part(text: str) -> bytes:
    return f"0:{json.dumps(text, ensure_ascii=False)}\n".encode("utf-8")


def finish_part(reason: str = "stop") -> bytes:
    return f"d:{json.dumps({'finishReason': reason})}\n".encode("utf-8")


def split_chunks(content: str, chunk_size: int | None = None) -> list[str]:
    if not content:
        return []
    if chunk_size is None or chunk_size <= 0:
        return [content]
    return [content[i : i + chunk_size] for i in range(0, len(content), chunk_size)]


async def stream_text(
    content: str,
    chunk_size: int | None = None,
) -> AsyncIterator[bytes]:
    for chunk in split_chunks(content, chunk_size):
        yield text_part(chunk)
    yield finish_part()


def render_turn(result: TurnResult) -> str:
    if result.kind == "image":
        return json.dumps(
            {
                "type": "image",
                "content": result.content,
                "imageUrl": result.image_url or "",
            },
            ensure_ascii=False,
        )
    return result.content


async def stream_turn(
    result: TurnResult,
    chunk_size: int | None = None,
) -> AsyncIterator[bytes]:
    async for part in stream_text(render_turn(result), chunk_size):
        yield part
