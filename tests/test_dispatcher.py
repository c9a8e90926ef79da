from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage, ToolMessage

from fakes import tool_reply
from gateway.core.dispatcher import TurnOrchestrator, extract_query
from gateway.core.errors import InvalidInputError, NoResultError, UnrecognizedIntentError
from gateway.core.types import Intent, TurnState
from gateway.schemas import ChatMessage


def _user(text) -> list[ChatMessage]:
    return [ChatMessage(role="user", content=text)]


def test_extract_query_reads_latest_user_message():
    messages = [
        ChatMessage(role="user", content="first question"),
        ChatMessage(role="assistant", content="first answer"),
        ChatMessage(role="user", content="  second question  "),
    ]

    assert extract_query(messages) == "second question"


def test_extract_query_reads_first_structured_part():
    messages = [ChatMessage(role="user", content=[{"text": "from parts"}, {"text": "ignored"}])]

    assert extract_query(messages) == "from parts"


@pytest.mark.parametrize(
    "messages",
    [
        [],
        [ChatMessage(role="assistant", content="only the assistant spoke")],
        [ChatMessage(role="user", content=None)],
        [ChatMessage(role="user", content=[])],
        [ChatMessage(role="user", content=[{"type": "image_url"}])],
        [ChatMessage(role="user", content="")],
    ],
)
def test_extract_query_rejects_empty_input(messages):
    with pytest.raises(InvalidInputError) as exc_info:
        extract_query(messages)

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_tool_turn_walks_every_state(context, model, adapters):
    model.responses = [
        AIMessage(content="WEATHER"),
        tool_reply("GetWeather", {"location": "Tokyo, JP"}),
        AIMessage(content="Clear skies in Tokyo."),
    ]
    orchestrator = TurnOrchestrator(context)

    result, iterator = await orchestrator.respond(_user("Weather in Tokyo?"))
    chunks = [chunk async for chunk in iterator]

    assert chunks
    assert result.intent is Intent.WEATHER
    assert result.content == "Clear skies in Tokyo."
    assert result.states == [
        TurnState.RECEIVED,
        TurnState.CLASSIFIED,
        TurnState.TOOLS_PENDING,
        TurnState.SYNTHESIZING,
        TurnState.STREAMING,
        TurnState.DONE,
    ]


@pytest.mark.asyncio
async def test_tool_call_with_alias_and_nested_arguments(context, model, adapters):
    model.responses = [
        AIMessage(content="stock"),
        AIMessage(
            content="",
            tool_calls=[
                {"name": "GetStockPrice", "args": {"ticker": "MSFT"}, "id": "a"},
                {"name": "GetStockPrice", "args": {"input": {"symbol": "AAPL"}}, "id": "b"},
            ],
        ),
        AIMessage(content="Both quotes are in."),
    ]

    result = await TurnOrchestrator(context).handle(_user("Compare Microsoft and Apple"))

    assert result.content == "Both quotes are in."
    assert adapters["stock"].calls == ["MSFT", "AAPL"]
    tool_ids = [m.tool_call_id for m in model.calls[-1] if isinstance(m, ToolMessage)]
    assert tool_ids == ["a", "b"]


@pytest.mark.asyncio
async def test_unresolvable_call_is_skipped_without_aborting_others(context, model, adapters):
    model.responses = [
        AIMessage(content="WEATHER"),
        AIMessage(
            content="",
            tool_calls=[
                {"name": "GetWeather", "args": {"units": "metric"}, "id": "bad"},
                {"name": "GetWeather", "args": {"city": "Paris, FR"}, "id": "good"},
                {"name": "LaunchRocket", "args": {"location": "Mars"}, "id": "unknown"},
            ],
        ),
        AIMessage(content="It is mild in Paris."),
    ]

    result = await TurnOrchestrator(context).handle(_user("Weather in Paris?"))

    assert result.content == "It is mild in Paris."
    assert adapters["weather"].calls == ["Paris, FR"]
    synthesis = model.calls[-1]
    tool_ids = [m.tool_call_id for m in synthesis if isinstance(m, ToolMessage)]
    assert tool_ids == ["good"]
    ai_calls = [m for m in synthesis if isinstance(m, AIMessage)]
    assert [m.tool_calls[0]["id"] for m in ai_calls] == ["good"]


@pytest.mark.asyncio
async def test_missing_call_id_is_generated_and_linked(context, model, adapters):
    model.responses = [
        AIMessage(content="IMAGE"),
        AIMessage(
            content="",
            tool_calls=[{"name": "ImageGenerationTool", "args": {"prompt": "a fox"}, "id": None}],
        ),
        AIMessage(content="Here is a fox."),
    ]

    result = await TurnOrchestrator(context).handle(_user("Draw a fox"))

    synthesis = model.calls[-1]
    ai_message = [m for m in synthesis if isinstance(m, AIMessage)][0]
    tool_message = [m for m in synthesis if isinstance(m, ToolMessage)][0]
    assert tool_message.tool_call_id
    assert ai_message.tool_calls[0]["id"] == tool_message.tool_call_id
    assert result.kind == "image"
    assert result.image_url == "https://images.test/castle.png"


@pytest.mark.asyncio
async def test_empty_synthesis_falls_back_to_tool_result(context, model, adapters):
    model.responses = [
        AIMessage(content="WEATHER"),
        tool_reply("GetWeather", {"location": "Tokyo, JP"}),
        AIMessage(content="  "),
    ]

    result = await TurnOrchestrator(context).handle(_user("Weather in Tokyo?"))

    assert result.content == adapters["weather"].result


@pytest.mark.asyncio
async def test_zero_tool_calls_fails_with_no_result(context, model):
    model.responses = [AIMessage(content="WEATHER"), AIMessage(content="Which city?")]

    with pytest.raises(NoResultError) as exc_info:
        await TurnOrchestrator(context).handle(_user("Is it raining?"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == (
        "I'm sorry, I couldn't process your request. Please try again."
    )


@pytest.mark.asyncio
async def test_book_turn_folds_passages_into_prompt(context, model, retriever):
    model.responses = [
        AIMessage(content="BOOK"),
        AIMessage(content="Adam was the first man in the book."),
    ]

    result = await TurnOrchestrator(context).handle(_user("Who is Adam?"))

    assert result.content == "Adam was the first man in the book."
    assert result.states[-1] is TurnState.SYNTHESIZING
    assert retriever.queries == ["Who is Adam?"]
    prompt = model.calls[-1][0].content
    assert "User query: Who is Adam?" in prompt
    assert "Adam was the first man.\nEve was the first woman." in prompt
    assert "Human: Who is Adam?\nAI: BOOK" in prompt


@pytest.mark.asyncio
async def test_empty_conversational_answer_uses_apology(context, model):
    model.responses = [AIMessage(content="PERSONAL"), AIMessage(content="")]

    result = await TurnOrchestrator(context).handle(_user("Tell me about the developer."))

    assert result.content == "I'm sorry, I couldn't retrieve information on that."


@pytest.mark.asyncio
async def test_unknown_label_marks_turn_failed(context, model):
    model.responses = [AIMessage(content="recipes")]

    with pytest.raises(UnrecognizedIntentError) as exc_info:
        await TurnOrchestrator(context).handle(_user("How do I bake bread?"))

    assert model.bound_tools == []
    assert exc_info.value.states == [TurnState.RECEIVED, TurnState.FAILED]


@pytest.mark.asyncio
async def test_empty_input_marks_turn_failed(context, model):
    with pytest.raises(InvalidInputError) as exc_info:
        await TurnOrchestrator(context).handle(_user("   "))

    assert exc_info.value.states == [TurnState.RECEIVED, TurnState.FAILED]
    assert model.calls == []


@pytest.mark.asyncio
async def test_retriever_error_marks_classified_turn_failed(context, model, retriever):
    retriever.error = RuntimeError("index unavailable")
    model.responses = [AIMessage(content="BOOK")]

    with pytest.raises(RuntimeError) as exc_info:
        await TurnOrchestrator(context).handle(_user("Who is Eve?"))

    assert exc_info.value.states == [
        TurnState.RECEIVED,
        TurnState.CLASSIFIED,
        TurnState.FAILED,
    ]
