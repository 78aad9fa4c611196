"""
Value Formatter — turns the captured values of one entity into a phrase.

    []                -> ""
    ["A"]             -> "A"
    ["A", "B"]        -> "A and B"
    ["A", "B", "C"]   -> "A, B and C"

No Oxford comma before "and".
"""
from __future__ import annotations

from typing import Iterable, Union

from models.schemas import FilledEntity, MemoryValue

LIST_SEPARATOR = ", "
LAST_SEPARATOR = " and "


def value_text(value: Union[MemoryValue, str]) -> str:
    """Display text wins over the raw user text."""
    if isinstance(value, str):
        return value
    return value.display_text or value.user_text or ""


def format_values(values: Iterable[Union[MemoryValue, str]]) -> str:
    texts = [value_text(v) for v in values]
    if len(texts) < 2:
        return "".join(texts)
    return LIST_SEPARATOR.join(texts[:-1]) + LAST_SEPARATOR + texts[-1]


def filled_entity_value_as_string(filled_entity: FilledEntity) -> str:
    return format_values(filled_entity.values)
