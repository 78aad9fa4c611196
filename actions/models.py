"""
Action Models — what a trained dialog can do at each turn.

An action is stored with an opaque JSON `payload` string whose shape depends
on `action_type`:

  TEXT / END_SESSION:  {"json": <rich-text document>}
  CARD:                {"payload": templateName, "arguments": [{parameter, value: {json}}]}
  API_LOCAL:           {"payload": apiName, "logicArguments": [...], "renderArguments": [...]}
  SET_ENTITY:          {"entityId": ..., "enumValueId": ...}

Payload shapes are validated once, when parsed, by the models below.
"""
from __future__ import annotations

import structlog
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from actions.errors import PayloadParseError
from models.schemas import (
    ActionClientData, ActionTypes, Condition, WireModel,
)
from rendering.serializer import (
    EntityValueMissingError, EntityValues, SerializerOptions, serialize,
)

logger = structlog.get_logger()

# Dummy action id handed to tooling that needs one for the stub action
STUB_IMPORT_ACTION_ID = "51cd7df5-e504-451d-b629-0932e604689c"

# Payload name marking the placeholder API action
STUB_API_NAME = "STUB_API"

TEXT_PAYLOAD_TYPES = (ActionTypes.TEXT, ActionTypes.END_SESSION)


# ──────────────────────────────────────────────────────────────
#  Payload shapes
# ──────────────────────────────────────────────────────────────

class TextPayload(WireModel):
    """Wrapper around a rich-text document tree."""
    document: dict[str, Any] = Field(alias="json")


class ActionArgumentPayload(WireModel):
    parameter: str
    value: Optional[TextPayload] = None


class NamedPayload(WireModel):
    """Any payload whose `payload` field names an API or card template."""
    payload: str


class CardPayload(NamedPayload):
    arguments: list[ActionArgumentPayload] = []


class ApiPayload(NamedPayload):
    logic_arguments: list[ActionArgumentPayload] = []
    render_arguments: list[ActionArgumentPayload] = []

    @field_validator("logic_arguments", "render_arguments", mode="before")
    @classmethod
    def _null_arguments(cls, v):
        return [] if v is None else v


class SetEntityPayload(WireModel):
    entity_id: str
    enum_value_id: str


P = TypeVar("P", bound=BaseModel)


def parse_payload(model: Type[P], payload: Any, action_type: Any) -> P:
    """Parse and validate a payload string, raising PayloadParseError on any failure."""
    legacy_hint = action_type in TEXT_PAYLOAD_TYPES
    if not isinstance(payload, (str, bytes)):
        raise PayloadParseError(action_type, "payload is not a JSON string", legacy_hint)
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        raise PayloadParseError(action_type, str(e), legacy_hint) from e


# ──────────────────────────────────────────────────────────────
#  Arguments
# ──────────────────────────────────────────────────────────────

class ActionArgument(WireModel):
    """A named argument whose value is a rich-text template."""
    parameter: str
    value: Optional[dict[str, Any]] = None

    @classmethod
    def from_payload(cls, argument: ActionArgumentPayload) -> ActionArgument:
        document = argument.value.document if argument.value is not None else None
        return cls(parameter=argument.parameter, value=document)

    def render_value(
        self,
        entity_values: EntityValues,
        options: Optional[SerializerOptions] = None,
    ) -> str:
        return serialize(self.value, entity_values, options)


class RenderedActionArgument(WireModel):
    parameter: str
    value: Optional[str] = None


def render_arguments(
    arguments: Sequence[ActionArgument],
    entity_values: EntityValues,
    options: Optional[SerializerOptions] = None,
) -> list[RenderedActionArgument]:
    """
    Render each argument independently. An argument that fails to render
    gets value None; its siblings still render.
    """
    rendered = []
    for argument in arguments:
        value = None
        try:
            value = argument.render_value(entity_values, options)
        except (EntityValueMissingError, KeyError, TypeError, ValueError) as e:
            logger.warning("action_argument_render_failed",
                           parameter=argument.parameter, error=str(e))
        rendered.append(RenderedActionArgument(parameter=argument.parameter, value=value))
    return rendered


# ──────────────────────────────────────────────────────────────
#  Action
# ──────────────────────────────────────────────────────────────

class ActionBase(WireModel):
    action_id: Optional[str] = None
    action_type: ActionTypes
    created_date_time: str = ""
    payload: str
    is_terminal: bool = False
    required_entities_from_payload: list[str] = []
    required_entities: list[str] = []
    negative_entities: list[str] = []
    required_conditions: list[Condition] = []
    negative_conditions: list[Condition] = []
    suggested_entity: Optional[str] = None
    version: int = 0
    package_creation_id: int = 0
    package_deletion_id: int = 0
    entity_id: Optional[str] = None
    enum_value_id: Optional[str] = None
    client_data: Optional[ActionClientData] = None

    @field_validator(
        "required_entities_from_payload", "required_entities", "negative_entities",
        "required_conditions", "negative_conditions",
        mode="before",
    )
    @classmethod
    def _null_lists(cls, v):
        return [] if v is None else v

    @classmethod
    def stub_action(cls) -> ActionBase:
        """Placeholder API action inserted by import tooling."""
        return cls(
            action_id=None,
            action_type=ActionTypes.API_LOCAL,
            payload=ApiPayload(payload=STUB_API_NAME).model_dump_json(by_alias=True),
            created_date_time=datetime.now(timezone.utc).isoformat(),
            is_terminal=False,
        )


class ActionList(WireModel):
    actions: list[ActionBase] = []


class ActionIdList(WireModel):
    action_ids: list[str] = []
