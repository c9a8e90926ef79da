from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from gateway.core.types import Intent

from .base import CapabilityAdapter


class WeatherArgs(BaseModel):
    location: str = Field(
        description="The city and country code, e.g., Los Angeles, US or Tokyo, JP"
    )


class StockArgs(BaseModel):
    symbol: str = Field(description="The stock ticker symbol (e.g., AAPL, GOOGL, MSFT)")


class NewsArgs(BaseModel):
    keyword: str = Field(
        description=(
            "The topic or keyword to search for in the news, "
            "e.g., 'technology', 'sports', or 'economy'."
        )
    )


class ImageArgs(BaseModel):
    prompt: str = Field(description="The detailed description for image generation")


@dataclass(frozen=True)
class CapabilityDescriptor:
    name: str
    description: str
    args_schema: type[BaseModel]
    argument: str
    adapter: CapabilityAdapter
    aliases: tuple[str, ...] = ()

    def to_tool(self) -> StructuredTool:
        async def _run(**kwargs: str) -> str:
            return await self.adapter.invoke(kwargs[self.argument])

        return StructuredTool.from_function(
            coroutine=_run,
            name=self.name,
            description=self.description,
            args_schema=self.args_schema,
        )


WEATHER_TOOL = "GetWeather"
STOCK_TOOL = "GetStockPrice"
NEWS_TOOL = "GeneralNewsTool"
IMAGE_TOOL = "ImageGenerationTool"

INTENT_CAPABILITIES: Mapping[Intent, tuple[str, ...]] = MappingProxyType(
    {
        Intent.WEATHER: (WEATHER_TOOL,),
        Intent.STOCK: (STOCK_TOOL,),
        Intent.IMAGE: (IMAGE_TOOL,),
    }
)


class CapabilityRegistry:
    """Static name -> capability map, built once per process."""

    def __init__(self, descriptors: list[CapabilityDescriptor]) -> None:
        self._descriptors = MappingProxyType({d.name: d for d in descriptors})

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def names(self) -> list[str]:
        return list(self._descriptors)

    def get(self, name: str) -> CapabilityDescriptor | None:
        return self._descriptors.get(name)

    def adapter(self, name: str) -> CapabilityAdapter:
        return self._descriptors[name].adapter

    def for_intent(self, intent: Intent) -> list[CapabilityDescriptor]:
        return [self._descriptors[name] for name in INTENT_CAPABILITIES.get(intent, ())]

    def tools_for(self, intent: Intent) -> list[StructuredTool]:
        return [descriptor.to_tool() for descriptor in self.for_intent(intent)]


def build_registry(
    *,
    weather: CapabilityAdapter,
    stock: CapabilityAdapter,
    news: CapabilityAdapter,
    image: CapabilityAdapter,
) -> CapabilityRegistry:
    return CapabilityRegistry(
        [
            CapabilityDescriptor(
                name=WEATHER_TOOL,
                description=(
                    "Fetches the current weather for a given location "
                    "using OpenWeatherMap API."
                ),
                args_schema=WeatherArgs,
                argument="location",
                aliases=("city", "place", "query"),
                adapter=weather,
            ),
            CapabilityDescriptor(
                name=STOCK_TOOL,
                description=(
                    "Fetches current stock price and basic information "
                    "for a given stock symbol"
                ),
                args_schema=StockArgs,
                argument="symbol",
                aliases=("ticker", "stock", "company"),
                adapter=stock,
            ),
            CapabilityDescriptor(
                name=NEWS_TOOL,
                description=(
                    "Fetches the latest general news based on a given keyword or topic."
                ),
                args_schema=NewsArgs,
                argument="keyword",
                aliases=("query", "topic"),
                adapter=news,
            ),
            CapabilityDescriptor(
                name=IMAGE_TOOL,
                description="Generates an image based on a user's prompt",
                args_schema=ImageArgs,
                argument="prompt",
                aliases=("description", "text"),
                adapter=image,
            ),
        ]
    )
