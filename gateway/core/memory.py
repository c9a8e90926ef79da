from __future__ import annotations

from collections import OrderedDict, deque
from dataclasses import dataclass

from .types import DEFAULT_SESSION_ID


@dataclass(frozen=True, slots=True)
class Exchange:
    human: str
    ai: str


class ConversationWindow:
    """Sliding window over the last ``capacity`` exchanges, oldest evicted first."""

    def __init__(self, capacity: int = 4) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._exchanges: deque[Exchange] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._exchanges)

    @property
    def exchanges(self) -> list[Exchange]:
        return list(self._exchanges)

    def append(self, human: str, ai: str) -> None:
        self._exchanges.append(Exchange(human=human, ai=ai))

    def render(self) -> str:
        lines: list[str] = []
        for exchange in self._exchanges:
            lines.append(f"Human: {exchange.human}")
            lines.append(f"AI: {exchange.ai}")
        return "\n".join(lines)


class SessionMemoryStore:
    """Per-session conversation windows with a least-recently-used session cap."""

    def __init__(self, window_capacity: int = 4, max_sessions: int = 1024) -> None:
        self.window_capacity = window_capacity
        self.max_sessions = max_sessions
        self._windows: OrderedDict[str, ConversationWindow] = OrderedDict()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._windows

    def get(self, session_id: str | None = None) -> ConversationWindow:
        key = session_id or DEFAULT_SESSION_ID
        window = self._windows.get(key)
        if window is not None:
            self._windows.move_to_end(key)
            return window

        window = ConversationWindow(self.window_capacity)
        self._windows[key] = window
        while len(self._windows) > self.max_sessions:
            self._windows.popitem(last=False)
        return window

    def reset(self) -> None:
        self._windows.clear()
