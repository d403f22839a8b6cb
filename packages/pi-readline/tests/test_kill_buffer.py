"""Tests for pi.readline.kill_buffer.KillBuffer -- single-slot scrap storage."""

from __future__ import annotations

from pi.readline.kill_buffer import KillBuffer


class TestKillBufferRecord:
    """Recording replaces or accumulates."""

    def test_starts_empty(self) -> None:
        kb = KillBuffer()
        assert kb.contents == ""
        assert kb.is_empty

    def test_record_replaces_by_default(self) -> None:
        kb = KillBuffer()
        kb.record("first", prepend=False)
        kb.record("second", prepend=True)
        assert kb.contents == "second"

    def test_accumulate_appends_forward_kills(self) -> None:
        kb = KillBuffer()
        kb.record("Hello", prepend=False)
        kb.record(" World", prepend=False, accumulate=True)
        assert kb.contents == "Hello World"

    def test_accumulate_prepends_backward_kills(self) -> None:
        kb = KillBuffer()
        kb.record("World", prepend=True)
        kb.record("Hello ", prepend=True, accumulate=True)
        assert kb.contents == "Hello World"

    def test_record_empty_text_clears(self) -> None:
        kb = KillBuffer()
        kb.record("text", prepend=False)
        kb.record("", prepend=False)
        assert kb.is_empty


class TestKillBufferClear:
    """Clearing empties the slot."""

    def test_clear(self) -> None:
        kb = KillBuffer()
        kb.record("text", prepend=False)
        kb.clear()
        assert kb.contents == ""
        assert kb.is_empty
