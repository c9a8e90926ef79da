from __future__ import annotations

import logging
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from gateway.config import Settings

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_chat_model(settings: Settings) -> BaseChatModel:
    _require(
        "chat model",
        azure_api_key=settings.azure_api_key,
        azure_resource_name=settings.azure_resource_name,
        azure_deployment=settings.azure_deployment,
    )

    from langchain_openai import AzureChatOpenAI

    return AzureChatOpenAI(
        api_key=settings.azure_api_key,
        azure_endpoint=settings.azure_endpoint,
        azure_deployment=settings.azure_deployment,
        api_version=settings.azure_api_version,
        temperature=settings.chat_temperature,
        max_tokens=settings.chat_max_tokens,
        max_retries=settings.chat_max_retries,
    )


def create_embeddings(settings: Settings) -> Any:
    _require(
        "embeddings",
        azure_api_key=settings.azure_api_key,
        azure_resource_name=settings.azure_resource_name,
        azure_embedding_deployment_name=settings.azure_embedding_deployment_name,
    )

    from langchain_openai import AzureOpenAIEmbeddings

    return AzureOpenAIEmbeddings(
        api_key=settings.azure_api_key,
        azure_endpoint=settings.azure_endpoint,
        azure_deployment=settings.azure_embedding_deployment_name,
        api_version=settings.azure_api_version,
        max_retries=3,
    )


def message_text(message: BaseMessage | str) -> str:
    """Flatten a model reply into plain text, keeping only text content parts."""
    if isinstance(message, str):
        return message

    content = message.content
    if isinstance(content, str):
        return content

    parts: list[str] = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and isinstance(part.get("text"), str):
            parts.append(part["text"])
    return "".join(parts)


def _require(component: str, **values: str | None) -> None:
    missing = [name.upper() for name, value in values.items() if not value]
    if missing:
        logger.error(
            "Cannot create %s: missing configuration %s", component, ", ".join(missing)
        )
        raise ConfigurationError(component)
