"""
Placeholder Tokenizer.

Splits template text on runs of whitespace and , : . ? ! [ ] to discover
candidate `$entityName` words. The split is lossy on purpose: callers replace
the discovered token inside the original text rather than reassembling tokens,
so punctuation next to a placeholder survives.
"""
from __future__ import annotations

import re

SUBSTITUTE_PREFIX = "$"

_DELIMITERS = re.compile(r"[\s,:.?!\[\]]+")


def split(text: str) -> list[str]:
    return [word for word in _DELIMITERS.split(text) if word]


def placeholders(text: str) -> list[str]:
    """Every `$name` token in order of appearance, duplicates included."""
    return [word for word in split(text) if word.startswith(SUBSTITUTE_PREFIX)]


def entity_name(token: str) -> str:
    return token[len(SUBSTITUTE_PREFIX):]


def remove_words(text: str, num_words: int) -> str:
    """Drop the first num_words space-separated words, i.e. a matched prefix."""
    for _ in range(num_words):
        if not text:
            break
        first_space = text.find(" ")
        text = text[first_space + 1:] if first_space > 0 else ""
    return text
