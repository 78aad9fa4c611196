"""
Rich-text serializer — renders an authored Slate-style document to plain text.

The document is a JSON tree. Text nodes carry literal runs, `mention-inline`
nodes reference an entity by id (data.option.id) and `optional-inline` nodes
wrap a contingent phrase in [ ].

    {"document": {"nodes": [
        {"object": "block", "type": "paragraph", "nodes": [
            {"object": "text", "leaves": [{"text": "I want a "}]},
            {"object": "inline", "type": "mention-inline",
             "data": {"option": {"id": "e1", "name": "size"}},
             "nodes": [{"object": "text", "leaves": [{"text": "$size"}]}]},
            ...
    ]}}

Optional phrases referencing an entity without a value are removed before
rendering. A mention without a value fails the render unless
fallback_to_original is set, in which case the mention's own text is kept.
A tree whose document or node lists are not JSON objects raises TypeError.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from config.settings import Settings, get_settings
from rendering.entity_map import FilledEntityMap

MENTION_INLINE = "mention-inline"
OPTIONAL_INLINE = "optional-inline"


class EntityValueMissingError(Exception):
    """A mention references an entity that has no value."""

    def __init__(self, entity_id: str = "", entity_name: str = ""):
        self.entity_id = entity_id
        self.entity_name = entity_name
        label = f"{entity_name} ({entity_id})" if entity_name else entity_id
        super().__init__(f"Could not find value for entity: {label}")


@dataclass(frozen=True)
class SerializerOptions:
    fallback_to_original: bool = False
    preserve_optional_brackets: bool = False

    @classmethod
    def from_settings(cls, settings: Settings = None) -> SerializerOptions:
        render = (settings or get_settings()).render
        return cls(
            fallback_to_original=render.fallback_to_original,
            preserve_optional_brackets=render.preserve_optional_brackets,
        )


EntityValues = Union[Mapping[str, str], FilledEntityMap]


def serialize(
    value: Mapping[str, Any],
    entity_values: EntityValues,
    options: Optional[SerializerOptions] = None,
) -> str:
    """
    Render a rich-text value using entity_values (entity id → display text).
    A FilledEntityMap is looked up by each entity's id, not its name.
    """
    if not isinstance(value, Mapping):
        raise TypeError(f"Rich-text value must be a JSON object, got {type(value).__name__}")
    if isinstance(entity_values, FilledEntityMap):
        entity_values = entity_values.display_value_map_by_id()
    options = options or SerializerOptions.from_settings()

    document = value.get("document", value)
    if not isinstance(document, Mapping):
        raise TypeError(f"Rich-text document must be a JSON object, got {type(document).__name__}")
    document = _remove_unfilled_optionals(document, entity_values)
    # top-level nodes are blocks (paragraphs), one per line
    return "\n".join(_serialize_node(block, entity_values, options) for block in _children(document))


def mentioned_entity_ids(node: Mapping[str, Any]) -> list[str]:
    """Entity ids referenced anywhere below node, in document order."""
    ids = []
    if _is_inline(node, MENTION_INLINE):
        entity_id = _mention_option(node).get("id")
        if entity_id:
            ids.append(entity_id)
    for child in _children(node):
        ids.extend(mentioned_entity_ids(child))
    return ids


# ══════════════════════════════════════════════════════════
#  Internals
# ══════════════════════════════════════════════════════════

def _kind(node: Mapping[str, Any]) -> Optional[str]:
    # older documents use "kind" instead of "object"
    return node.get("object") or node.get("kind")


def _is_inline(node: Mapping[str, Any], node_type: str) -> bool:
    return _kind(node) == "inline" and node.get("type") == node_type


def _children(node: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    nodes = node.get("nodes")
    if nodes is None:
        return []
    if not isinstance(nodes, list) or not all(isinstance(child, Mapping) for child in nodes):
        raise TypeError("Rich-text nodes must be a list of JSON objects")
    return nodes


def _mention_option(node: Mapping[str, Any]) -> Mapping[str, Any]:
    data = node.get("data")
    option = data.get("option") if isinstance(data, Mapping) else None
    return option if isinstance(option, Mapping) else {}


def _text_of(node: Mapping[str, Any]) -> str:
    leaves = node.get("leaves")
    if leaves is None:
        return str(node.get("text", ""))
    if not isinstance(leaves, list) or not all(isinstance(leaf, Mapping) for leaf in leaves):
        raise TypeError("Rich-text leaves must be a list of JSON objects")
    return "".join(str(leaf.get("text", "")) for leaf in leaves)


def _remove_unfilled_optionals(node: Mapping[str, Any], entity_values: Mapping[str, str]):
    if _kind(node) == "text":
        return node
    if _is_inline(node, OPTIONAL_INLINE):
        if not all(entity_values.get(i) for i in mentioned_entity_ids(node)):
            return None

    children = (_remove_unfilled_optionals(child, entity_values) for child in _children(node))
    return {**node, "nodes": [child for child in children if child is not None]}


def _serialize_node(
    node: Mapping[str, Any],
    entity_values: Mapping[str, str],
    options: SerializerOptions,
) -> str:
    if _kind(node) == "text":
        return _text_of(node)

    children = [_serialize_node(child, entity_values, options) for child in _children(node)]

    if _is_inline(node, MENTION_INLINE):
        option = _mention_option(node)
        entity_value = entity_values.get(option.get("id", ""))
        if entity_value:
            return entity_value
        if options.fallback_to_original:
            return "".join(children)
        raise EntityValueMissingError(option.get("id", ""), option.get("name", ""))

    if _is_inline(node, OPTIONAL_INLINE) and not options.preserve_optional_brackets:
        text = "".join(children)
        if text.startswith("[") and text.endswith("]"):
            return text[1:-1]
        return text

    return "".join(children)
