from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .base import CapabilityAdapter

logger = logging.getLogger(__name__)

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"
MISSING = "N/A"


class StockAdapter(CapabilityAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = FINNHUB_BASE_URL,
    ) -> None:
        super().__init__(client, api_key, base_url)

    async def invoke(self, symbol: str) -> str:
        symbol = symbol.strip().upper()
        if not self.api_key:
            logger.warning("Stock lookup skipped: FINNHUB_API_KEY is not set")
            return _apology(symbol)

        params = {"symbol": symbol, "token": self.api_key}
        quote_response, profile_response = await asyncio.gather(
            self.client.get(f"{self.base_url}/quote", params=params),
            self.client.get(f"{self.base_url}/stock/profile2", params=params),
            return_exceptions=True,
        )
        if isinstance(profile_response, BaseException):
            logger.info("Company profile request for %r failed: %r", symbol, profile_response)
            profile_response = None
        if isinstance(quote_response, BaseException):
            logger.error("Stock API error for %r: %r", symbol, quote_response)
            return _apology(symbol)

        try:
            if quote_response.is_error:
                logger.warning(
                    "Stock quote for %r failed with status %s",
                    symbol,
                    quote_response.status_code,
                )
                return _apology(symbol)

            quote = quote_response.json()
            profile = _optional_json(profile_response)
        except Exception:
            logger.exception("Stock API error for %r", symbol)
            return _apology(symbol)

        if not isinstance(quote, dict):
            logger.warning("Stock quote for %r was not an object: %r", symbol, quote)
            return _apology(symbol)

        return format_stock_summary(symbol, quote, profile)


def format_stock_summary(
    symbol: str,
    quote: dict[str, Any],
    profile: dict[str, Any],
) -> str:
    company = profile.get("name") or "Unknown Company"
    return (
        f"Stock Information for {symbol} ({company}):\n"
        f"- Current Price: ${format_number(quote.get('c'))}\n"
        f"- Previous Close: ${format_number(quote.get('pc'))}\n"
        f"- Change: {format_percent(quote.get('dp'))}%"
    )


def format_number(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MISSING
    return str(value)


def format_percent(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MISSING
    return f"{value:.2f}"


def _optional_json(response: httpx.Response | None) -> dict[str, Any]:
    if response is None:
        return {}
    if response.is_error:
        logger.info("Company profile unavailable (status=%s)", response.status_code)
        return {}
    try:
        payload = response.json()
    except ValueError:
        logger.info("Company profile payload was not JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


def _apology(symbol: str) -> str:
    return (
        f'Sorry, I couldn\'t fetch stock information for "{symbol}". '
        "Please check the symbol and try again."
    )
