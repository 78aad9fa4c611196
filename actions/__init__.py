"""
Action Payload Model.

Actions are what a trained dialog does at each turn: say something (TEXT),
call an API (API_LOCAL), show a card (CARD), end the session (END_SESSION)
or set an enum entity (SET_ENTITY). Their payloads are JSON strings whose
shape depends on the type; this package parses them once into typed views
and renders their templates with entity values.
"""
from actions.errors import (
    ActionModelError, PayloadParseError, VariantMismatchError,
)
from actions.models import (
    ActionBase, ActionArgument, RenderedActionArgument,
    TextPayload, CardPayload, ApiPayload, SetEntityPayload,
    ActionList, ActionIdList, STUB_API_NAME, STUB_IMPORT_ACTION_ID, render_arguments,
)
from actions.payload import payload_text, action_arguments, is_stubbed_action
from actions.variants import (
    TextAction, ApiAction, CardAction, SessionAction, SetEntityAction,
)
