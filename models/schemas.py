"""
Core data models shared between the dialog trainer and the runtime scorer.
These are the wire types exchanged over the API; field names are snake_case
in Python and camelCase on the wire.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for every DTO: camelCase aliases, immutable once constructed."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ──────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────

class ActionTypes(str, Enum):
    TEXT = "TEXT"
    API_LOCAL = "API_LOCAL"
    CARD = "CARD"
    END_SESSION = "END_SESSION"
    SET_ENTITY = "SET_ENTITY"


class ConditionType(str, Enum):
    EQUAL = "EQUAL"


class DialogType(str, Enum):
    TEACH = "teach"
    TRAINDIALOG = "traindialog"
    LOGDIALOG = "logdialog"


# ──────────────────────────────────────────────────────────────
#  Entities: captured slot values
# ──────────────────────────────────────────────────────────────

class MemoryValue(WireModel):
    """One captured value of an entity. display_text overrides user_text when rendering."""
    user_text: Optional[str] = None             # what the user actually typed
    display_text: Optional[str] = None          # normalized text shown in output
    builtin_type: Optional[str] = None          # e.g. "builtin.number"
    resolution: dict[str, Any] = {}             # opaque resolver output


class FilledEntity(WireModel):
    """A resolved entity and its values, in capture order."""
    entity_id: Optional[str] = None
    values: list[MemoryValue] = []

    @field_validator("values", mode="before")
    @classmethod
    def _null_values(cls, v):
        return [] if v is None else v


class PredictedEntity(WireModel):
    start_char_index: int
    end_char_index: int
    entity_id: str
    entity_name: str = ""
    entity_text: str = ""
    builtin_type: str = ""
    resolution: dict[str, Any] = {}
    score: Optional[float] = None


# ──────────────────────────────────────────────────────────────
#  Action conditions and client metadata
# ──────────────────────────────────────────────────────────────

class Condition(WireModel):
    entity_id: str
    value_id: str
    condition: ConditionType = ConditionType.EQUAL


class ActionClientData(WireModel):
    import_hashes: Optional[list[str]] = None   # matches imported utterances to actions


# ──────────────────────────────────────────────────────────────
#  Score: scorer request / response
# ──────────────────────────────────────────────────────────────

class Metrics(WireModel):
    wall_time: float = 0


class ScoreInput(WireModel):
    filled_entities: list[FilledEntity] = []
    context: dict[str, Any] = {}
    masked_actions: list[str] = []


class ScoredBase(WireModel):
    """Minimal action view returned by the scorer."""
    action_id: str
    payload: str
    is_terminal: bool = False
    action_type: str


class UnscoredAction(ScoredBase):
    reason: str


class ScoredAction(ScoredBase):
    score: float


class ScoreResponse(WireModel):
    scored_actions: list[ScoredAction] = []
    unscored_actions: list[UnscoredAction] = []
    metrics: Metrics = Metrics()

    @property
    def best_action(self) -> Optional[ScoredAction]:
        if not self.scored_actions:
            return None
        return max(self.scored_actions, key=lambda a: a.score)


# ──────────────────────────────────────────────────────────────
#  Extract: entity extraction response
# ──────────────────────────────────────────────────────────────

class ExtractResponse(WireModel):
    text: str
    predicted_entities: list[PredictedEntity] = []
    metrics: Metrics = Metrics()
    package_id: str = ""
    definitions: dict[str, Any] = {}            # app definition snapshot, opaque here


# ──────────────────────────────────────────────────────────────
#  Session
# ──────────────────────────────────────────────────────────────

class Session(WireModel):
    session_id: str
    created_datetime: str
    last_query_datetime: str
    package_id: int
    save_to_log: bool


class SessionList(WireModel):
    sessions: list[Session] = []


class SessionIdList(WireModel):
    session_ids: list[str] = []


class SessionCreateParams(WireModel):
    context_dialog: Optional[list[dict[str, Any]]] = None   # log rounds, opaque here
    package_id: Optional[str] = None
    save_to_log: bool
