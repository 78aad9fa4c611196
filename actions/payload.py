"""
Payload dispatch — reads an action's payload according to its type.

These helpers accept a full ActionBase or the slimmer ScoredBase the scorer
returns, since both carry `action_type` and `payload`.
"""
from __future__ import annotations

import json
import structlog
from dataclasses import replace
from typing import Any, Mapping, Optional, Union

from actions.errors import PayloadParseError
from actions.models import (
    ActionArgument, ActionBase, ApiPayload, CardPayload, NamedPayload,
    STUB_API_NAME, TEXT_PAYLOAD_TYPES, TextPayload, parse_payload,
)
from models.schemas import ActionTypes, ScoredBase
from rendering.serializer import EntityValues, SerializerOptions, serialize

logger = structlog.get_logger()

AnyAction = Union[ActionBase, ScoredBase]


def payload_text(
    action: AnyAction,
    entity_values: EntityValues,
    options: Optional[SerializerOptions] = None,
) -> str:
    """
    The display string for an action.

    TEXT / END_SESSION render their rich-text document with entity_values;
    unfilled mentions keep their authored text unless options say otherwise.
    CARD / API_LOCAL return the template / API name untouched. Anything else
    returns the raw payload.

    A TEXT / END_SESSION payload whose document tree is malformed raises
    PayloadParseError, the same as one that fails to parse.
    """
    action_type = action.action_type

    if action_type in TEXT_PAYLOAD_TYPES:
        text_payload = parse_payload(TextPayload, action.payload, action_type)
        if options is None:
            options = replace(SerializerOptions.from_settings(), fallback_to_original=True)
        try:
            return serialize(text_payload.document, entity_values, options)
        except TypeError as e:
            raise PayloadParseError(action_type, str(e), legacy_hint=True) from e

    if action_type in (ActionTypes.CARD, ActionTypes.API_LOCAL):
        return parse_payload(NamedPayload, action.payload, action_type).payload

    return action.payload


def action_arguments(action: AnyAction) -> list[ActionArgument]:
    """Card arguments, or API logic arguments followed by render arguments."""
    action_type = action.action_type

    if action_type == ActionTypes.CARD:
        card = parse_payload(CardPayload, action.payload, action_type)
        return [ActionArgument.from_payload(a) for a in card.arguments]

    if action_type == ActionTypes.API_LOCAL:
        api = parse_payload(ApiPayload, action.payload, action_type)
        return [ActionArgument.from_payload(a) for a in api.logic_arguments + api.render_arguments]

    return []


def is_stubbed_action(action: Union[AnyAction, Mapping[str, Any], None]) -> bool:
    """True for the placeholder API action inserted by import tooling. Never raises."""
    if action is None:
        return False
    if isinstance(action, Mapping):
        payload = action.get("payload")
    else:
        payload = getattr(action, "payload", None)
    if not payload:
        return False

    try:
        data = json.loads(payload)
    except (TypeError, ValueError):
        logger.debug("stub_check_unparsable_payload",
                     action_id=getattr(action, "action_id", None))
        return False
    return isinstance(data, dict) and data.get("payload") == STUB_API_NAME
