from __future__ import annotations

import logging

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from .errors import UnrecognizedIntentError
from .generation import message_text
from .memory import ConversationWindow
from .prompts import classification_prompt
from .types import Intent

logger = logging.getLogger(__name__)

_LABEL_STRIP_CHARS = " \t\r\n.,;:!?'\"`*"


def parse_intent(raw: str) -> Intent:
    """Map the classifier's one-word answer onto the closed intent set."""
    label = raw.strip(_LABEL_STRIP_CHARS).lower()
    match label:
        case "book":
            return Intent.BOOK
        case "personal":
            return Intent.PERSONAL
        case "weather":
            return Intent.WEATHER
        case "stock":
            return Intent.STOCK
        case "image":
            return Intent.IMAGE
        case "news":
            return Intent.NEWS
        case _:
            raise UnrecognizedIntentError(raw)


class IntentClassifier:
    def __init__(
        self,
        model: BaseChatModel,
        prompt: ChatPromptTemplate = classification_prompt,
    ) -> None:
        self.model = model
        self.prompt = prompt

    async def classify(self, query: str, window: ConversationWindow) -> Intent:
        chain = self.prompt | self.model
        reply = await chain.ainvoke({"history": window.render(), "question": query})
        raw = message_text(reply)

        # The classification step is itself a conversational exchange.
        window.append(query, raw.strip())

        intent = parse_intent(raw)
        logger.debug("Classified query as %s", intent.value)
        return intent
