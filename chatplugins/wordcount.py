"""Hot words of a group chat: filtering, counting and ranking."""

from __future__ import annotations

import re
from bisect import bisect_left
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

MAX_MESSAGES = 10000
DEFAULT_MESSAGES = 1000
TOP_N = 20

_CHINESE_WORD = re.compile("[一-龥]+")


def load_stopwords(text: str) -> list[str]:
    """Split a stop-word file into a sorted list."""
    return sorted(text.replace("\r", "").split("\n"))


def is_countable(word: str, stopwords: Sequence[str]) -> bool:
    """True if ``word`` is made of Chinese characters and is no stop word."""
    if not _CHINESE_WORD.fullmatch(word):
        return False
    i = bisect_left(stopwords, word)
    return i >= len(stopwords) or stopwords[i] != word


def count_words(slices: Iterable[str], stopwords: Sequence[str]) -> Counter[str]:
    """Count the countable words among segmented slices."""
    counts: Counter[str] = Counter()
    for piece in slices:
        word = piece.strip()
        if is_countable(word, stopwords):
            counts[word] += 1
    return counts


def rank_by_word_count(frequencies: Mapping[str, int]) -> list[tuple[str, int]]:
    """Return (word, count) pairs, most frequent first."""
    return sorted(frequencies.items(), key=lambda item: item[1], reverse=True)


def top_words(frequencies: Mapping[str, int], n: int = TOP_N) -> list[tuple[str, int]]:
    return rank_by_word_count(frequencies)[:n]


def clamp_message_count(count: int) -> int:
    """Apply the message-count limit and the default for an empty request."""
    if count > MAX_MESSAGES:
        return MAX_MESSAGES
    if count == 0:
        return DEFAULT_MESSAGES
    return count