from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING, AsyncIterator, Sequence

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from langchain_core.messages.tool import ToolCall, tool_call
from langchain_core.prompts import ChatPromptTemplate

from gateway.schemas import ChatMessage
from gateway.tools.registry import IMAGE_TOOL, NEWS_TOOL

from .arguments import ArgumentResolutionError, resolve_argument
from .classifier import IntentClassifier
from .errors import InvalidInputError, NoResultError, UnrecognizedIntentError
from .generation import message_text
from .memory import ConversationWindow
from .prompts import TOOL_SYSTEM_PROMPTS, book_prompt, personal_prompt
from .streaming import stream_turn
from .types import Intent, TurnResult, TurnState

if TYPE_CHECKING:
    from gateway.context import GatewayContext

logger = logging.getLogger(__name__)

EMPTY_ANSWER = "I'm sorry, I couldn't retrieve information on that."


def extract_query(messages: Sequence[ChatMessage]) -> str:
    """Return the text of the latest user message, or raise InvalidInputError."""
    user_messages = [message for message in messages if message.role.lower() == "user"]
    if not user_messages:
        raise InvalidInputError("Invalid message format")

    content = user_messages[-1].content
    if isinstance(content, str):
        query = content
    elif content:
        first = content[0]
        query = first.get("text") if isinstance(first, dict) else None
        if not isinstance(query, str):
            query = ""
    else:
        query = ""

    query = query.strip()
    if not query:
        raise InvalidInputError("Empty user query")
    return query


class TurnTrace:
    def __init__(self) -> None:
        self.states: list[TurnState] = [TurnState.RECEIVED]

    @property
    def current(self) -> TurnState:
        return self.states[-1]

    def advance(self, state: TurnState) -> None:
        logger.debug("Turn %s -> %s", self.current.value, state.value)
        self.states.append(state)


class TurnOrchestrator:
    def __init__(self, context: GatewayContext) -> None:
        self.context = context

    async def respond(
        self,
        messages: Sequence[ChatMessage],
        session_id: str | None = None,
    ) -> tuple[TurnResult, AsyncIterator[bytes]]:
        result = await self.handle(messages, session_id)
        result.states.append(TurnState.STREAMING)

        async def _iterator() -> AsyncIterator[bytes]:
            async for part in stream_turn(result):
                yield part
            result.states.append(TurnState.DONE)

        return result, _iterator()

    async def handle(
        self,
        messages: Sequence[ChatMessage],
        session_id: str | None = None,
    ) -> TurnResult:
        trace = TurnTrace()
        try:
            query = extract_query(messages)
            window = self.context.memory.get(session_id)
            intent = await IntentClassifier(self.context.chat_model).classify(query, window)
            trace.advance(TurnState.CLASSIFIED)

            result = await self._dispatch(intent, query, window, trace)
        except Exception as exc:
            trace.advance(TurnState.FAILED)
            exc.states = trace.states  # type: ignore[attr-defined]
            logger.info(
                "Turn failed (%s): %s",
                " -> ".join(state.value for state in trace.states),
                type(exc).__name__,
            )
            raise

        result.states = trace.states
        return result

    async def _dispatch(
        self,
        intent: Intent,
        query: str,
        window: ConversationWindow,
        trace: TurnTrace,
    ) -> TurnResult:
        match intent:
            case _ if intent.uses_tools:
                return await self._tool_turn(intent, query, trace)
            case Intent.BOOK:
                passages = await self.context.retriever.retrieve(query)
                trace.advance(TurnState.SYNTHESIZING)
                documents = "\n".join(passages)
                content = await self._converse(
                    book_prompt,
                    query,
                    f"User query: {query}\nDocuments:\n{documents}",
                    window,
                )
                return TurnResult(intent=intent, content=content)
            case Intent.PERSONAL:
                trace.advance(TurnState.SYNTHESIZING)
                content = await self._converse(
                    personal_prompt,
                    query,
                    f"User query: {query}",
                    window,
                )
                return TurnResult(intent=intent, content=content)
            case Intent.NEWS:
                trace.advance(TurnState.SYNTHESIZING)
                content = await self.context.registry.adapter(NEWS_TOOL).invoke(query)
                return TurnResult(intent=intent, content=content)
            case _:
                raise UnrecognizedIntentError(str(intent))

    async def _tool_turn(self, intent: Intent, query: str, trace: TurnTrace) -> TurnResult:
        model = self.context.chat_model
        registry = self.context.registry
        messages: list[BaseMessage] = [
            SystemMessage(content=TOOL_SYSTEM_PROMPTS[intent.value]),
            HumanMessage(content=query),
        ]

        trace.advance(TurnState.TOOLS_PENDING)
        reply = await model.bind_tools(registry.tools_for(intent)).ainvoke(messages)
        tool_calls = list(getattr(reply, "tool_calls", None) or [])
        if not tool_calls:
            logger.warning("No tool call returned for %s query", intent.value)
            raise NoResultError()

        image_url: str | None = None
        last_result = ""
        for call in tool_calls:
            outcome = await self._run_tool_call(call)
            if outcome is None:
                continue

            call, result = outcome
            last_result = result
            if call["name"] == IMAGE_TOOL:
                image_url = result or image_url
                content = json.dumps({"imageUrl": result})
            else:
                content = result

            messages.append(AIMessage(content="", tool_calls=[call]))
            messages.append(
                ToolMessage(content=content, tool_call_id=call["id"], name=call["name"])
            )

        trace.advance(TurnState.SYNTHESIZING)
        final = await model.ainvoke(messages)
        content = message_text(final).strip() or last_result

        if intent is Intent.IMAGE:
            return TurnResult(intent=intent, content=content, kind="image", image_url=image_url)
        return TurnResult(intent=intent, content=content)

    async def _run_tool_call(self, call: ToolCall) -> tuple[ToolCall, str] | None:
        name = call.get("name", "")
        descriptor = self.context.registry.get(name)
        if descriptor is None:
            logger.error("Skipping call to unknown tool %r", name)
            return None

        try:
            argument = resolve_argument(
                call.get("args"), descriptor.argument, descriptor.aliases
            )
        except ArgumentResolutionError as exc:
            logger.error("Skipping %s call: %s", name, exc)
            return None

        logger.info(
            "Invoking %s with %s=%r (%s)",
            name,
            descriptor.argument,
            argument.value,
            argument.source.value,
        )
        result = await descriptor.adapter.invoke(argument.value)

        call_id = call.get("id") or f"call_{uuid.uuid4().hex}"
        normalized = tool_call(
            name=name,
            args={descriptor.argument: argument.value},
            id=call_id,
        )
        return normalized, result

    async def _converse(
        self,
        prompt: ChatPromptTemplate,
        query: str,
        text: str,
        window: ConversationWindow,
    ) -> str:
        chain = prompt | self.context.chat_model
        reply = await chain.ainvoke({"history": window.render(), "input": text})
        content = message_text(reply).strip()
        window.append(query, content)
        return content or EMPTY_ANSWER
