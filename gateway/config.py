from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-sourced gateway settings.

    Every credential is optional: a missing key only degrades the
    capability that needs it, never the process startup.
    """

    # Generation engine (Azure OpenAI chat deployment)
    azure_api_key: str | None = None
    azure_resource_name: str | None = None
    azure_deployment: str | None = None
    azure_api_version: str = "2024-02-15-preview"
    chat_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    chat_max_tokens: int = Field(default=300, ge=1)
    chat_max_retries: int = Field(default=5, ge=0)

    # Embedding engine
    azure_embedding_deployment_name: str | None = None

    # Image generation
    azure_image_endpoint: str = "https://llm-course-openai-pp.openai.azure.com"
    azure_image_deployment: str = "dall-e-3-deployment"
    azure_image_api_version: str = "2024-02-01"

    # Vector index
    pinecone_api_key: str | None = None
    pinecone_index: str = "adam-eve-book-index"
    retrieval_top_k: int = Field(default=4, ge=1)

    # Third-party data APIs
    openweather_api_key: str | None = None
    finnhub_api_key: str | None = None
    news_api_key: str | None = None
    http_timeout: float = Field(default=10.0, gt=0)

    # Conversation memory
    memory_window: int = Field(default=4, ge=1)
    max_sessions: int = Field(default=1024, ge=1)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def azure_endpoint(self) -> str | None:
        if not self.azure_resource_name:
            return None
        return f"https://{self.azure_resource_name}.openai.azure.com"


@lru_cache
def get_settings() -> Settings:
    return Settings()
