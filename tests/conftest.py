from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import FakeRetriever, RecordingAdapter, ScriptedChatModel
from gateway.config import Settings
from gateway.context import GatewayContext
from gateway.main import create_app
from gateway.tools.registry import build_registry


@pytest.fixture()
def adapters() -> dict[str, RecordingAdapter]:
    return {
        "weather": RecordingAdapter(
            "The current weather in Tokyo is clear sky with a temperature of 21.5°C."
        ),
        "stock": RecordingAdapter("Stock Information for AAPL (Apple Inc):"),
        "news": RecordingAdapter('Here are the top news articles for "technology":'),
        "image": RecordingAdapter("https://images.test/castle.png"),
    }


@pytest.fixture()
def model() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture()
def retriever() -> FakeRetriever:
    return FakeRetriever(["Adam was the first man.", "Eve was the first woman."])


@pytest.fixture()
def context(model, retriever, adapters) -> GatewayContext:
    return GatewayContext(
        Settings(memory_window=4, max_sessions=8),
        chat_model=model,
        retriever=retriever,
        registry=build_registry(**adapters),
    )


@pytest.fixture()
def client(context) -> TestClient:
    return TestClient(create_app(context))
