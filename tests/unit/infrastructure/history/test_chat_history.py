"""Tests for chat history truncation and storage."""

import asyncio

import pytest

from openrouter_gateway.domain.enums import ChatRole
from openrouter_gateway.infrastructure.history import (
    ChatHistoryStore,
    InMemoryChatHistory,
    estimate_tokens,
    truncate_chat_history,
)
from openrouter_gateway.models import ChatMessage


def user(content: str) -> ChatMessage:
    return ChatMessage(role=ChatRole.USER, content=content)


def assistant(content: str) -> ChatMessage:
    return ChatMessage(role=ChatRole.ASSISTANT, content=content)


class TestEstimateTokens:
    """Test the word-count token heuristic."""

    def test_word_count_times_factor(self) -> None:
        assert estimate_tokens("one two three") == 12
        assert estimate_tokens("one two three", tokens_per_word=2) == 6

    def test_empty_text_counts_as_one_word(self) -> None:
        assert estimate_tokens("") == 4
        assert estimate_tokens("   ") == 4


class TestTruncateChatHistory:
    """Test newest-first truncation."""

    def test_empty_history(self) -> None:
        assert truncate_chat_history([], max_tokens=100) == []

    def test_drops_oldest_when_over_budget(self) -> None:
        """Three one-word messages cost 12 tokens; with a budget of 8 the oldest is dropped."""
        a, b, c = user("A"), assistant("B"), user("C")

        result = truncate_chat_history([a, b, c], max_tokens=8, tokens_per_word=4)

        assert result == [b, c]

    def test_everything_fits(self) -> None:
        history = [user("hello there"), assistant("hi"), user("how are you")]

        assert truncate_chat_history(history, max_tokens=8000) == history

    def test_result_is_suffix_within_budget(self) -> None:
        """Test that the kept messages are the most recent ones and fit the budget."""
        history = [user(" ".join(["word"] * n)) for n in (5, 3, 7, 2, 4, 1)]

        result = truncate_chat_history(history, max_tokens=30)

        assert result == history[len(history) - len(result) :]
        assert sum(estimate_tokens(m.content) for m in result) <= 30
        assert len(result) == 3

    def test_stops_at_first_message_that_does_not_fit(self) -> None:
        """Test that an older short message is not kept after a long one was skipped."""
        history = [user("short"), user(" ".join(["long"] * 10)), user("recent")]

        assert truncate_chat_history(history, max_tokens=20) == [history[2]]

    def test_oversized_newest_message_is_kept(self) -> None:
        """Test that the result is empty only for empty input."""
        history = [user("old"), user(" ".join(["word"] * 10))]

        assert truncate_chat_history(history, max_tokens=8) == [history[1]]

    def test_does_not_mutate_input(self) -> None:
        history = [user("a"), user("b"), user("c")]
        snapshot = list(history)

        truncate_chat_history(history, max_tokens=4)

        assert history == snapshot


class TestInMemoryChatHistory:
    """Test the default history store."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryChatHistory(), ChatHistoryStore)

    async def test_append_and_snapshot(self) -> None:
        history = InMemoryChatHistory()

        await history.append(user("hi"), assistant("hello"))

        assert [m.content for m in history.snapshot()] == ["hi", "hello"]
        assert len(history) == 2

    async def test_snapshot_is_a_copy(self) -> None:
        history = InMemoryChatHistory([user("hi")])

        history.snapshot().append(user("ignored"))

        assert len(history) == 1

    async def test_clear(self) -> None:
        history = InMemoryChatHistory([user("hi")])

        await history.clear()

        assert history.snapshot() == []

    async def test_clear_waits_for_append_in_progress(self) -> None:
        """Test that clear is serialized with appends on the same lock."""
        history = InMemoryChatHistory([user("old")])

        async with history._lock:
            clearing = asyncio.create_task(history.clear())
            await asyncio.sleep(0)
            assert not clearing.done()
            assert len(history) == 1

        await clearing
        assert history.snapshot() == []

    async def test_concurrent_appends_keep_pairs_together(self) -> None:
        """Test that each exchange lands as an adjacent user/assistant pair."""
        history = InMemoryChatHistory()

        await asyncio.gather(*(history.append(user(f"q{i}"), assistant(f"a{i}")) for i in range(10)))

        messages = history.snapshot()
        assert len(messages) == 20
        for question, answer in zip(messages[::2], messages[1::2], strict=True):
            assert question.content[1:] == answer.content[1:]


@pytest.mark.parametrize("max_tokens", [4, 8, 12, 100])
def test_truncation_is_deterministic(max_tokens: int) -> None:
    history = [user("a b"), assistant("c"), user("d e f")]

    assert truncate_chat_history(history, max_tokens) == truncate_chat_history(history, max_tokens)
