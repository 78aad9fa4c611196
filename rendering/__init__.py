"""
Entity rendering.

Turns authored templates into the text a dialog actually says:
  - Value formatting ("A, B and C")
  - The entity value store built once per render
  - `$entity` placeholder substitution and [contingent phrase] elision
  - Rich-text document serialization with entity mentions
"""
from rendering.formatter import format_values, filled_entity_value_as_string
from rendering.tokenizer import SUBSTITUTE_PREFIX, split, placeholders, remove_words
from rendering.entity_map import FilledEntityMap, substitute
from rendering.serializer import (
    EntityValueMissingError, SerializerOptions, serialize, mentioned_entity_ids,
)
