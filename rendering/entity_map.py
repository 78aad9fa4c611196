"""
Entity Value Store + Substitution Engine.

A FilledEntityMap is built once per render request from resolved entities
and never mutated afterwards, so one instance can be shared by any number of
renders.

Substitution runs in two passes:

  1. Entities — every `$name` token found by the tokenizer is replaced
     (first remaining textual occurrence) with the entity's formatted value.
     Unknown or empty entities stay literal, e.g. "$size", so authors can
     see the slot was never filled.
  2. Contingent phrases — the first `[` and first `]` delimit a phrase.
     If the phrase still holds a `$` past its first character it is dropped
     together with its brackets, otherwise only the brackets go. Repeats
     left to right until no `[ ... ]` pair remains.

Brackets are matched first-open / first-close, not balanced, so nested
brackets resolve in scan order.
"""
from __future__ import annotations

import structlog
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from models.schemas import FilledEntity
from rendering.formatter import filled_entity_value_as_string
from rendering.tokenizer import SUBSTITUTE_PREFIX, entity_name, placeholders

logger = structlog.get_logger()


class FilledEntityMap:
    """Read-only mapping of entity name → FilledEntity."""

    def __init__(self, entities: Optional[Mapping[str, Union[FilledEntity, dict[str, Any]]]] = None):
        self._entities: Mapping[str, FilledEntity] = MappingProxyType({
            name: fe if isinstance(fe, FilledEntity) else FilledEntity.model_validate(fe)
            for name, fe in (entities or {}).items()
        })

    @classmethod
    def from_filled_entities(
        cls,
        filled_entities: Iterable[FilledEntity],
        entity_names: Mapping[str, str],
    ) -> FilledEntityMap:
        """
        Build the store from a scorer's filled entity list.

        Args:
            filled_entities: entities as sent in ScoreInput.filled_entities
            entity_names:    entity_id → entity name lookup
        """
        entities: dict[str, FilledEntity] = {}
        for fe in filled_entities:
            name = entity_names.get(fe.entity_id) if fe.entity_id else None
            if name is None:
                logger.debug("filled_entity_unnamed", entity_id=fe.entity_id)
                continue
            entities[name] = fe
        return cls(entities)

    # ── Mapping protocol ──────────────────────────────

    def __getitem__(self, name: str) -> FilledEntity:
        return self._entities[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def get(self, name: str) -> Optional[FilledEntity]:
        return self._entities.get(name)

    @property
    def entities(self) -> Mapping[str, FilledEntity]:
        return self._entities

    # ── Lookup ────────────────────────────────────────

    def value_as_list(self, name: str) -> list[str]:
        """Raw user text of each value; values without user text are skipped."""
        fe = self._entities.get(name)
        if fe is None:
            return []
        return [v.user_text for v in fe.values if isinstance(v.user_text, str)]

    def value_as_string(self, name: str) -> Optional[str]:
        fe = self._entities.get(name)
        if fe is None:
            return None
        return filled_entity_value_as_string(fe)

    def display_value_map(self) -> dict[str, str]:
        """entity name → display string, leaving out entities that format to ''."""
        display = {}
        for name in self._entities:
            value = self.value_as_string(name)
            if value:
                display[name] = value
        return display

    def display_value_map_by_id(self) -> dict[str, str]:
        """entity id → display string, the lookup rich-text mentions use."""
        display = {}
        for name, fe in self._entities.items():
            value = self.value_as_string(name)
            if fe.entity_id and value:
                display[fe.entity_id] = value
        return display

    # ── Substitution ──────────────────────────────────

    def substitute_entities(self, text: str) -> str:
        for token in placeholders(text):
            name = entity_name(token)
            value = self.value_as_string(name)
            if value:
                text = text.replace(token, value, 1)
            else:
                logger.debug("placeholder_unresolved", entity=name)
        return text

    @staticmethod
    def substitute_brackets(text: str) -> str:
        """Resolve contingent phrases, i.e. "[, with $topping]"."""
        while True:
            start = text.find("[")
            end = text.find("]")
            if start < 0 or end < 0 or end < start:
                return text

            phrase = text[start + 1:end]
            bracketed = f"[{phrase}]"
            if phrase.find(SUBSTITUTE_PREFIX) > 0:
                text = text.replace(bracketed, "", 1)
            else:
                text = text.replace(bracketed, phrase, 1)

    def substitute(self, text: str) -> str:
        text = self.substitute_entities(text)
        return self.substitute_brackets(text)


def substitute(text: str, entity_map: FilledEntityMap) -> str:
    return entity_map.substitute(text)
