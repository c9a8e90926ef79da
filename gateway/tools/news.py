from __future__ import annotations

import logging
from typing import Any

import httpx

from .base import CapabilityAdapter

logger = logging.getLogger(__name__)

NEWSAPI_BASE_URL = "https://newsapi.org/v2"
PAGE_SIZE = 5


class NewsAdapter(CapabilityAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = NEWSAPI_BASE_URL,
        language: str = "en",
        page_size: int = PAGE_SIZE,
    ) -> None:
        super().__init__(client, api_key, base_url)
        self.language = language
        self.page_size = page_size

    async def invoke(self, keyword: str) -> str:
        if not self.api_key:
            logger.warning("News lookup skipped: NEWS_API_KEY is not set")
            return _apology(keyword)

        try:
            response = await self.client.get(
                f"{self.base_url}/everything",
                params={
                    "q": keyword,
                    "apiKey": self.api_key,
                    "language": self.language,
                    "pageSize": self.page_size,
                },
            )
            payload = response.json()
            articles = payload.get("articles") if isinstance(payload, dict) else None
            if response.is_error or not articles:
                logger.warning(
                    "News lookup for %r returned no articles (status=%s): %s",
                    keyword,
                    response.status_code,
                    payload.get("message", "Unknown error")
                    if isinstance(payload, dict)
                    else "Unknown error",
                )
                return _apology(keyword)

            summary = "\n\n".join(
                _format_article(index, article)
                for index, article in enumerate(articles[: self.page_size], start=1)
            )
        except Exception:
            logger.exception("News API error for %r", keyword)
            return _apology(keyword)

        return f'Here are the top news articles for "{keyword}":\n\n{summary}'


def _format_article(index: int, article: dict[str, Any]) -> str:
    source = article.get("source") or {}
    return (
        f"{index}. {article.get('title') or 'Untitled'} - "
        f"{source.get('name') or 'Unknown source'}\n"
        f"{article.get('description') or ''}\n"
        f"Read more: {article.get('url') or ''}"
    )


def _apology(keyword: str) -> str:
    return f'Sorry, I couldn\'t fetch news for "{keyword}". Please try again later.'
