"""
Fixed prompt templates used by the classifier and the conversational
handlers. Every template takes the rendered conversation window as
``{history}``.
"""

from __future__ import annotations

from langchain_core.prompts import ChatPromptTemplate

CLASSIFICATION_TEMPLATE = """
Consider the recent conversation to help classify the question accurately.
Use the conversation context to distinguish between 'BOOK', 'PERSONAL', 'WEATHER', 'STOCK', 'IMAGE', and 'NEWS' questions.

Conversation history:
{history}

Based on the conversation above:
- Respond 'BOOK' if the question is specifically about the content, events, or characters in the book "Adam and Eve."
- Respond 'PERSONAL' if the question is about the developer, system information, or the chatbot itself.
- Respond 'WEATHER' if the question is about weather conditions for any location.
- Respond 'STOCK' if the question is about the stock price or market data of any company.
- Respond 'IMAGE' if the question requests generating or visualizing an image.
- Respond 'NEWS' if the question requests news or information about a specific topic or keyword.

Examples:
- "Who is Adam?" -> BOOK
- "Tell me about the developer." -> PERSONAL
- "What's the weather in New York?" -> WEATHER
- "What's the stock price for Apple?" -> STOCK
- "Show me an image of a castle." -> IMAGE
- "What's the latest news on technology?" -> NEWS
- "Tell me about the latest sports updates." -> NEWS

Question: {question}
Respond with only one word - either BOOK, PERSONAL, WEATHER, STOCK, IMAGE, or NEWS.
"""

BOOK_TEMPLATE = """
The following is a friendly conversation between a human and an AI knowledgeable about
the book "Adam and Eve". The AI provides detailed, accurate answers based on its
understanding of the book. If the AI does not know the answer to a question, it
truthfully states that it does not know.

Current conversation:
{history}
Human: {input}
AI:
"""

PERSONAL_TEMPLATE = """
The following is a friendly conversation between a human and an AI assistant that can
provide information about the developer and the system. The AI provides polite and
concise responses about the developer's identity and background, as well as information
about the chatbot's purpose.

Current conversation:
{history}
Human: {input}
AI:

- If the question is about the developer's identity:
  "The developer of this chatbot is Payal Bhattad."

- If the question is about details or background of the developer:
  "Payal Bhattad is a dedicated graduate student in computer science with a strong
  background in software engineering, having two years of industry experience. She's
  passionate about AI and ML and balances her academic pursuits with a love for badminton."

- If the question is about the chatbot itself:
  "This chatbot is designed to answer questions about the book Adam and Eve, provide weather updates, deliver stock market information, share the latest news, and generate images."

- If asked for additional personal information not specified here:
  "Information not available."

- If greeted with "Hello" or "Hi":
  "Hello! How can I help you?"

Question: {input}
"""

TOOL_SYSTEM_PROMPTS = {
    "weather": "You are a helpful assistant that provides weather information.",
    "stock": "You are a helpful assistant that provides stock market information.",
    "image": "You are a helpful image generation assistant.",
}

classification_prompt = ChatPromptTemplate.from_template(CLASSIFICATION_TEMPLATE)
book_prompt = ChatPromptTemplate.from_template(BOOK_TEMPLATE)
personal_prompt = ChatPromptTemplate.from_template(PERSONAL_TEMPLATE)
