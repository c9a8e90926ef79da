from __future__ import annotations

import logging

import httpx
from langchain_core.language_models.chat_models import BaseChatModel

from gateway.config import Settings
from gateway.core.errors import ConfigurationError
from gateway.core.generation import create_chat_model, create_embeddings
from gateway.core.memory import SessionMemoryStore
from gateway.retrieval.retriever import PassageRetriever, VectorStoreRetriever
from gateway.tools.image import ImageAdapter
from gateway.tools.news import NewsAdapter
from gateway.tools.registry import CapabilityRegistry, build_registry
from gateway.tools.stock import StockAdapter
from gateway.tools.weather import WeatherAdapter

logger = logging.getLogger(__name__)


class GatewayContext:
    """Process-wide shared resources, built at startup and closed at shutdown.

    The chat model and the retriever are created on first use so that a
    missing credential only fails the requests that need it.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
        chat_model: BaseChatModel | None = None,
        retriever: PassageRetriever | None = None,
        registry: CapabilityRegistry | None = None,
        memory: SessionMemoryStore | None = None,
    ) -> None:
        self.settings = settings
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)
        self._chat_model = chat_model
        self._retriever = retriever
        self.registry = registry if registry is not None else self._build_registry()
        if memory is None:
            memory = SessionMemoryStore(
                window_capacity=settings.memory_window,
                max_sessions=settings.max_sessions,
            )
        self.memory = memory

    @property
    def chat_model(self) -> BaseChatModel:
        if self._chat_model is None:
            self._chat_model = create_chat_model(self.settings)
        return self._chat_model

    @property
    def retriever(self) -> PassageRetriever:
        if self._retriever is None:
            self._retriever = self._build_retriever()
        return self._retriever

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
        self.memory.reset()
        logger.info("Gateway context closed")

    def _build_registry(self) -> CapabilityRegistry:
        settings = self.settings
        return build_registry(
            weather=WeatherAdapter(self.http_client, settings.openweather_api_key),
            stock=StockAdapter(self.http_client, settings.finnhub_api_key),
            news=NewsAdapter(self.http_client, settings.news_api_key),
            image=ImageAdapter(
                self.http_client,
                settings.azure_api_key,
                base_url=settings.azure_image_endpoint,
                deployment=settings.azure_image_deployment,
                api_version=settings.azure_image_api_version,
            ),
        )

    def _build_retriever(self) -> PassageRetriever:
        if not self.settings.pinecone_api_key:
            logger.error("Cannot create retriever: missing configuration PINECONE_API_KEY")
            raise ConfigurationError("vector index")

        from pinecone import Pinecone

        client = Pinecone(api_key=self.settings.pinecone_api_key)
        return VectorStoreRetriever(
            client.Index(self.settings.pinecone_index),
            create_embeddings(self.settings),
            top_k=self.settings.retrieval_top_k,
        )
