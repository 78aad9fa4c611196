"""
Typed action views.

Each variant is built from a base action of the matching type and exposes
its payload as typed fields:

    TextAction.from_action(action).render_value(entity_values)
    ApiAction.from_action(action).render_logic_arguments(entity_values)

Building a variant from an action of another type raises
VariantMismatchError; a payload that does not fit raises PayloadParseError.
"""
from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import model_validator

from actions.errors import VariantMismatchError
from actions.models import (
    ActionArgument, ActionBase, ApiPayload, CardPayload, RenderedActionArgument,
    SetEntityPayload, TextPayload, parse_payload, render_arguments,
)
from actions.payload import is_stubbed_action
from models.schemas import ActionTypes
from rendering.serializer import EntityValues, SerializerOptions, serialize


class ActionVariant(ActionBase):
    """Base for typed views; subclasses declare which type they accept."""
    expected_type: ClassVar[ActionTypes]

    @model_validator(mode="before")
    @classmethod
    def _parse_variant(cls, data: Any) -> Any:
        base = data if isinstance(data, ActionBase) else ActionBase.model_validate(data)
        if base.action_type != cls.expected_type:
            raise VariantMismatchError(cls.expected_type, base.action_type)
        return {**base.model_dump(), **cls._payload_fields(base)}

    @classmethod
    def _payload_fields(cls, action: ActionBase) -> dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def from_action(cls, action: ActionBase):
        return cls.model_validate(action)


class _RichTextVariant(ActionVariant):
    value: dict[str, Any] = {}                 # rich-text document

    @classmethod
    def _payload_fields(cls, action: ActionBase) -> dict[str, Any]:
        text_payload = parse_payload(TextPayload, action.payload, action.action_type)
        return {"value": text_payload.document}

    def render_value(
        self,
        entity_values: EntityValues,
        options: Optional[SerializerOptions] = None,
    ) -> str:
        return serialize(self.value, entity_values, options)


class TextAction(_RichTextVariant):
    expected_type: ClassVar[ActionTypes] = ActionTypes.TEXT


class SessionAction(_RichTextVariant):
    expected_type: ClassVar[ActionTypes] = ActionTypes.END_SESSION


class ApiAction(ActionVariant):
    expected_type: ClassVar[ActionTypes] = ActionTypes.API_LOCAL

    name: str = ""
    logic_arguments: list[ActionArgument] = []
    render_arguments: list[ActionArgument] = []

    @classmethod
    def _payload_fields(cls, action: ActionBase) -> dict[str, Any]:
        api = parse_payload(ApiPayload, action.payload, action.action_type)
        return {
            "name": api.payload,
            "logic_arguments": [ActionArgument.from_payload(a) for a in api.logic_arguments],
            "render_arguments": [ActionArgument.from_payload(a) for a in api.render_arguments],
        }

    @property
    def is_stub(self) -> bool:
        return is_stubbed_action(self)

    def render_logic_arguments(
        self,
        entity_values: EntityValues,
        options: Optional[SerializerOptions] = None,
    ) -> list[RenderedActionArgument]:
        return render_arguments(self.logic_arguments, entity_values, options)

    def render_render_arguments(
        self,
        entity_values: EntityValues,
        options: Optional[SerializerOptions] = None,
    ) -> list[RenderedActionArgument]:
        return render_arguments(self.render_arguments, entity_values, options)


class CardAction(ActionVariant):
    expected_type: ClassVar[ActionTypes] = ActionTypes.CARD

    template_name: str = ""
    arguments: list[ActionArgument] = []

    @classmethod
    def _payload_fields(cls, action: ActionBase) -> dict[str, Any]:
        card = parse_payload(CardPayload, action.payload, action.action_type)
        return {
            "template_name": card.payload,
            "arguments": [ActionArgument.from_payload(a) for a in card.arguments],
        }

    def render_arguments(
        self,
        entity_values: EntityValues,
        options: Optional[SerializerOptions] = None,
    ) -> list[RenderedActionArgument]:
        return render_arguments(self.arguments, entity_values, options)


class SetEntityAction(ActionVariant):
    expected_type: ClassVar[ActionTypes] = ActionTypes.SET_ENTITY

    @classmethod
    def _payload_fields(cls, action: ActionBase) -> dict[str, Any]:
        # the scored view of an action only carries the payload, so ids come from there
        set_entity = parse_payload(SetEntityPayload, action.payload, action.action_type)
        return {
            "entity_id": set_entity.entity_id,
            "enum_value_id": set_entity.enum_value_id,
        }
