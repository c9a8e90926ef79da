from __future__ import annotations

import pytest

from gateway.core.memory import ConversationWindow, SessionMemoryStore


def test_window_never_exceeds_capacity_and_evicts_oldest():
    window = ConversationWindow(capacity=4)

    for turn in range(1, 6):
        window.append(f"question {turn}", f"answer {turn}")
        assert len(window) <= 4

    assert [e.human for e in window.exchanges] == [
        "question 2",
        "question 3",
        "question 4",
        "question 5",
    ]


def test_window_render_uses_conversation_labels():
    window = ConversationWindow(capacity=2)
    window.append("Hi", "Hello! How can I help you?")

    assert window.render() == "Human: Hi\nAI: Hello! How can I help you?"


def test_empty_window_renders_empty_history():
    assert ConversationWindow().render() == ""


def test_window_rejects_zero_capacity():
    with pytest.raises(ValueError):
        ConversationWindow(capacity=0)


def test_store_returns_same_window_per_session():
    store = SessionMemoryStore(window_capacity=3)

    first = store.get("alpha")
    first.append("q", "a")

    assert store.get("alpha") is first
    assert store.get("beta") is not first
    assert len(store.get("beta")) == 0


def test_store_defaults_missing_session_id():
    store = SessionMemoryStore()

    assert store.get(None) is store.get("default")
    assert "default" in store


def test_store_evicts_least_recently_used_session():
    store = SessionMemoryStore(max_sessions=2)
    store.get("a")
    store.get("b")
    store.get("a")
    store.get("c")

    assert "a" in store
    assert "c" in store
    assert "b" not in store
    assert len(store) == 2
