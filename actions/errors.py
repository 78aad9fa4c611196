"""Errors raised while interpreting action payloads."""
from __future__ import annotations

from typing import Any

LEGACY_PAYLOAD_HINT = (
    "This might be an old action which was saved as a string. Please create a new action."
)


def _type_name(action_type: Any) -> str:
    return getattr(action_type, "value", action_type) or "UNKNOWN"


class ActionModelError(Exception):
    """Base exception for action model failures."""

    def __init__(self, message: str, action_type: Any = ""):
        self.action_type = _type_name(action_type)
        super().__init__(message)


class PayloadParseError(ActionModelError):
    """The payload JSON is malformed or missing fields its action type requires."""

    def __init__(self, action_type: Any, detail: str, legacy_hint: bool = False):
        self.detail = detail
        self.legacy_hint = legacy_hint
        message = f"Error when attempting to parse {_type_name(action_type)} action payload: {detail}"
        if legacy_hint:
            message = f"{message} {LEGACY_PAYLOAD_HINT}"
        super().__init__(message, action_type)


class VariantMismatchError(ActionModelError):
    """A typed action view was requested for an action of another type."""

    def __init__(self, expected: Any, actual: Any):
        self.expected = _type_name(expected)
        super().__init__(
            f"You attempted to create {self.expected} action from action of type: {_type_name(actual)}",
            actual,
        )
