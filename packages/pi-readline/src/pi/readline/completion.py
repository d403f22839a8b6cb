"""Tab-completion: the suggestion source contract and the cycling state machine."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_SEPARATORS: frozenset[str] = frozenset(" /\\:")


class CompletionSource(Protocol):
    """Provides completion candidates for the token being typed."""

    separators: set[str] | frozenset[str]

    def get_suggestions(self, text: str, index: int) -> Sequence[str] | None:
        """Return candidates for the token starting at *index* in *text*.

        An empty result or ``None`` means there is nothing to complete.
        """
        ...


def find_anchor(text: str, separators: Iterable[str]) -> int:
    """Return the offset one past the last separator in *text*, or 0."""
    last = max((text.rfind(sep) for sep in separators), default=-1)
    return last + 1


class CompletionEngine:
    """Candidate list, anchor offset and cyclic index.

    Inactive while ``candidates`` is ``None``. ``start`` activates it at index
    0, ``next``/``previous`` cycle modulo the candidate count, and ``reset``
    deactivates it.
    """

    def __init__(self) -> None:
        self._candidates: list[str] | None = None
        self._anchor = 0
        self._index = 0

    @property
    def is_active(self) -> bool:
        return self._candidates is not None

    @property
    def candidates(self) -> list[str] | None:
        return self._candidates

    @property
    def anchor(self) -> int:
        return self._anchor

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> str | None:
        if self._candidates is None:
            return None
        return self._candidates[self._index]

    def start(self, candidates: Sequence[str], anchor: int) -> str:
        if not candidates:
            raise ValueError("cannot start completion without candidates")
        self._candidates = list(candidates)
        self._anchor = anchor
        self._index = 0
        logger.debug("Completion started at %d with %d candidates", anchor, len(self._candidates))
        return self._candidates[0]

    def next(self) -> str:
        if self._candidates is None:
            raise RuntimeError("completion is not active")
        self._index = (self._index + 1) % len(self._candidates)
        return self._candidates[self._index]

    def previous(self) -> str:
        if self._candidates is None:
            raise RuntimeError("completion is not active")
        self._index = (self._index - 1) % len(self._candidates)
        return self._candidates[self._index]

    def reset(self) -> None:
        self._candidates = None
        self._anchor = 0
        self._index = 0


class WordCompletionSource:
    """Completes the current token against a fixed word list by prefix."""

    def __init__(
        self,
        words: Iterable[str],
        separators: Iterable[str] = DEFAULT_SEPARATORS,
    ) -> None:
        self.words = list(words)
        self.separators = set(separators)

    def get_suggestions(self, text: str, index: int) -> list[str]:
        prefix = text[index:]
        return [word for word in self.words if word.startswith(prefix)]
