from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

TEXT_METADATA_KEY = "text"


class PassageRetriever(Protocol):
    async def retrieve(self, query: str) -> list[str]: ...


class VectorStoreRetriever:
    """Ranked passages from a pre-populated vector index.

    ``index`` is a Pinecone index handle (``query`` is called in a worker
    thread) and ``embeddings`` a LangChain embeddings model.
    """

    def __init__(self, index: Any, embeddings: Any, top_k: int = 4) -> None:
        self.index = index
        self.embeddings = embeddings
        self.top_k = top_k

    async def retrieve(self, query: str) -> list[str]:
        vector = await self.embeddings.aembed_query(query)
        response = await asyncio.to_thread(
            self.index.query,
            vector=vector,
            top_k=self.top_k,
            include_metadata=True,
        )
        passages = [
            text
            for text in (_match_text(match) for match in _matches(response))
            if text
        ]
        logger.debug("Retrieved %d passages", len(passages))
        return passages


def _matches(response: Any) -> list[Any]:
    if isinstance(response, dict):
        return list(response.get("matches") or [])
    return list(getattr(response, "matches", None) or [])


def _match_text(match: Any) -> str | None:
    metadata = match.get("metadata") if isinstance(match, dict) else getattr(match, "metadata", None)
    if not metadata:
        return None
    text = metadata.get(TEXT_METADATA_KEY)
    return text if isinstance(text, str) else None
