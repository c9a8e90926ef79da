from __future__ import annotations

from dataclasses import dataclass

GENERIC_ERROR_MESSAGE = (
    "An error occurred while processing your request. Please try again later."
)


@dataclass
class GatewayError(Exception):
    status_code: int
    message: str
    code: str | None = None

    def __str__(self) -> str:
        return self.message


class InvalidInputError(GatewayError):
    def __init__(self, message: str = "Invalid message format") -> None:
        super().__init__(status_code=400, message=message, code="invalid_input")


class UnrecognizedIntentError(GatewayError):
    """Raised when the classifier answers with a label outside the intent set."""

    def __init__(self, label: str) -> None:
        super().__init__(
            status_code=400,
            message=(
                "I'm sorry, I couldn't understand your question. Please try asking "
                "about the book, the weather, stocks, news, or image generation."
            ),
            code="unrecognized_intent",
        )
        self.label = label


class NoResultError(GatewayError):
    def __init__(self) -> None:
        super().__init__(
            status_code=500,
            message="I'm sorry, I couldn't process your request. Please try again.",
            code="no_result",
        )


class ConfigurationError(GatewayError):
    def __init__(self, component: str) -> None:
        super().__init__(
            status_code=500,
            message=GENERIC_ERROR_MESSAGE,
            code="not_configured",
        )
        self.component = component
