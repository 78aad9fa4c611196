"""Shared test fixtures for the dialog action models."""
import json

import pytest

from config import settings as settings_module
from models.schemas import ActionTypes, FilledEntity, MemoryValue
from rendering.entity_map import FilledEntityMap
from actions.models import ActionBase


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Every test starts from built-in defaults, not a cached or user config."""
    monkeypatch.delenv("DIALOG_MODELS_CONFIG", raising=False)
    monkeypatch.setattr(settings_module, "_settings", settings_module.Settings())


# ──────────────────────────────────────────────────────
#  Rich-text document builders
# ──────────────────────────────────────────────────────

class Slate:
    """Builds Slate-style rich-text documents the way the authoring UI saves them."""

    @staticmethod
    def text(text: str) -> dict:
        return {"object": "text", "leaves": [{"object": "leaf", "text": text, "marks": []}]}

    @staticmethod
    def mention(entity_id: str, name: str) -> dict:
        return {
            "object": "inline",
            "type": "mention-inline",
            "isVoid": False,
            "data": {"completed": True, "option": {"id": entity_id, "name": name}},
            "nodes": [Slate.text(f"${name}")],
        }

    @staticmethod
    def optional(*nodes: dict) -> dict:
        return {
            "object": "inline",
            "type": "optional-inline",
            "data": {},
            "nodes": [Slate.text("["), *nodes, Slate.text("]")],
        }

    @staticmethod
    def paragraph(*nodes: dict) -> dict:
        return {"object": "block", "type": "paragraph", "data": {}, "nodes": list(nodes)}

    @staticmethod
    def value(*blocks: dict) -> dict:
        return {"object": "value", "document": {"object": "document", "data": {}, "nodes": list(blocks)}}


@pytest.fixture
def slate():
    return Slate


def make_entity(*user_texts: str, entity_id: str = None) -> FilledEntity:
    return FilledEntity(entity_id=entity_id, values=[MemoryValue(user_text=t) for t in user_texts])


# ──────────────────────────────────────────────────────
#  Entities
# ──────────────────────────────────────────────────────

@pytest.fixture
def coffee_entities() -> FilledEntityMap:
    return FilledEntityMap({
        "size": make_entity("large", entity_id="e-size"),
        "topping": make_entity("caramel", entity_id="e-topping"),
        "extras": make_entity("cream", "sugar", "cinnamon", entity_id="e-extras"),
    })


@pytest.fixture
def empty_entities() -> FilledEntityMap:
    return FilledEntityMap()


@pytest.fixture
def coffee_values() -> dict:
    """entity id → display text, as handed to the rich-text serializer."""
    return {"e-size": "large", "e-topping": "caramel"}


# ──────────────────────────────────────────────────────
#  Actions
# ──────────────────────────────────────────────────────

def make_action(action_type: ActionTypes, payload, **kwargs) -> ActionBase:
    if not isinstance(payload, str):
        payload = json.dumps(payload)
    return ActionBase(
        action_id=kwargs.pop("action_id", f"action-{action_type.value.lower()}"),
        action_type=action_type,
        created_date_time="2024-05-01T10:00:00.000Z",
        payload=payload,
        **kwargs,
    )


@pytest.fixture
def coffee_document(slate) -> dict:
    """I want a $size coffee[, with $topping]"""
    return slate.value(slate.paragraph(
        slate.text("I want a "),
        slate.mention("e-size", "size"),
        slate.text(" coffee"),
        slate.optional(slate.text(", with "), slate.mention("e-topping", "topping")),
    ))


@pytest.fixture
def text_action(coffee_document) -> ActionBase:
    return make_action(ActionTypes.TEXT, {"json": coffee_document})


@pytest.fixture
def api_action(slate) -> ActionBase:
    return make_action(ActionTypes.API_LOCAL, {
        "payload": "placeOrder",
        "logicArguments": [
            {"parameter": "size", "value": {"json": slate.value(slate.paragraph(slate.mention("e-size", "size")))}},
            {"parameter": "shop", "value": {"json": slate.value(slate.paragraph(slate.text("downtown")))}},
        ],
        "renderArguments": [
            {"parameter": "topping", "value": {"json": slate.value(slate.paragraph(slate.mention("e-topping", "topping")))}},
            {"parameter": "note", "value": {"json": slate.value(slate.paragraph(slate.text("thanks")))}},
        ],
    })


@pytest.fixture
def card_action(slate) -> ActionBase:
    return make_action(ActionTypes.CARD, {
        "payload": "orderSummary",
        "arguments": [
            {"parameter": "title", "value": {"json": slate.value(slate.paragraph(slate.text("Your order")))}},
            {"parameter": "size", "value": {"json": slate.value(slate.paragraph(slate.mention("e-size", "size")))}},
        ],
    })
