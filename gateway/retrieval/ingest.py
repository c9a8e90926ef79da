"""
Offline ingestion of the source book into the vector index.

The pipeline splits the text into overlapping chunks, embeds them and
upserts them in batches. It is idempotent by probe: when a representative
query already finds a match, the upload is skipped. A rate-limited batch
is retried on its own with exponentially growing delays.

Run it as ``python -m gateway.retrieval.ingest data/adam-and-eve.txt``.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable

from langchain_text_splitters import RecursiveCharacterTextSplitter
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from gateway.config import get_settings
from gateway.core.errors import ConfigurationError
from gateway.core.generation import create_embeddings
from gateway.logging_config import configure_logging

from .retriever import TEXT_METADATA_KEY

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1100
CHUNK_OVERLAP = 20
BATCH_SIZE = 100
MAX_RETRIES = 5
PROBE_QUERY = "who is adam?"


def is_rate_limited(exc: BaseException) -> bool:
    for attribute in ("status", "status_code", "code"):
        if str(getattr(exc, attribute, "")) == "429":
            return True
    return False


@dataclass(slots=True)
class IngestionReport:
    chunks: int = 0
    batches: int = 0
    skipped: bool = False


class IngestionPipeline:
    def __init__(
        self,
        index: Any,
        embeddings: Any,
        *,
        chunk_size: int = CHUNK_SIZE,
        chunk_overlap: int = CHUNK_OVERLAP,
        batch_size: int = BATCH_SIZE,
        max_retries: int = MAX_RETRIES,
        base_delay: float = 1.0,
        batch_pause: float = 0.1,
        probe_query: str = PROBE_QUERY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.index = index
        self.embeddings = embeddings
        self.splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
        )
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.batch_pause = batch_pause
        self.probe_query = probe_query
        self.sleep = sleep

    def split(self, text: str) -> list[str]:
        return [chunk for chunk in self.splitter.split_text(text) if chunk.strip()]

    async def is_populated(self) -> bool:
        vector = await self.embeddings.aembed_query(self.probe_query)
        response = await asyncio.to_thread(
            self.index.query,
            vector=vector,
            top_k=1,
            include_metadata=False,
        )
        matches = (
            response.get("matches")
            if isinstance(response, dict)
            else getattr(response, "matches", None)
        )
        return bool(matches)

    async def run(self, text: str) -> IngestionReport:
        if await self.is_populated():
            logger.info("Embeddings already exist in the vector store, skipping upload")
            return IngestionReport(skipped=True)

        chunks = self.split(text)
        logger.info("Created %d chunks", len(chunks))
        batches = await self.upload(chunks)
        logger.info("Upload complete: %d chunks in %d batches", len(chunks), batches)
        return IngestionReport(chunks=len(chunks), batches=batches)

    async def upload(self, chunks: list[str]) -> int:
        vectors = await self.embeddings.aembed_documents(chunks)

        batches = 0
        for start in range(0, len(chunks), self.batch_size):
            records = [
                {
                    "id": f"chunk-{start + offset}",
                    "values": vector,
                    "metadata": {TEXT_METADATA_KEY: chunk},
                }
                for offset, (chunk, vector) in enumerate(
                    zip(
                        chunks[start : start + self.batch_size],
                        vectors[start : start + self.batch_size],
                    )
                )
            ]
            batches += 1
            await self.upsert_batch(records, batches)
            if self.batch_pause:
                await self.sleep(self.batch_pause)

        return batches

    async def upsert_batch(self, records: list[dict[str, Any]], batch_number: int) -> None:
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_rate_limited),
            wait=wait_exponential(multiplier=self.base_delay),
            stop=stop_after_attempt(self.max_retries + 1),
            sleep=self.sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await asyncio.to_thread(self.index.upsert, vectors=records)
        logger.info("Uploaded batch %d", batch_number)


def _build_pipeline() -> IngestionPipeline:
    from pinecone import Pinecone

    settings = get_settings()
    if not settings.pinecone_api_key:
        raise ConfigurationError("vector index")

    client = Pinecone(api_key=settings.pinecone_api_key)
    return IngestionPipeline(
        client.Index(settings.pinecone_index),
        create_embeddings(settings),
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Embed a text file into the vector index.")
    parser.add_argument("source", type=Path, help="path of the text to ingest")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    logger.info("Reading %s", args.source)
    text = args.source.read_text(encoding="utf-8")

    asyncio.run(_build_pipeline().run(text))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
