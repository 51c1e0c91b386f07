"""Converse dispatch package.

Provides the session and response types, the action handler interface, and the
dispatcher that drives a multi-turn converse session.
"""

from witdialog.agents.types import (
    ActionHandler,
    ConverseClient,
    ConverseResponse,
    ConversationContext,
    DispatchError,
    DispatchResult,
    MessageResponse,
    OutcomeKind,
    ResponseDecoder,
    ResponseType,
    Session,
    TraceEvent,
    TurnOutcome,
)
from witdialog.agents.context import (
    STOPPED_KEY,
    clear_stopped,
    is_stopped,
    mark_stopped,
    new_context,
)
from witdialog.agents.decoder import WitResponseDecoder
from witdialog.agents.dispatcher import Dispatcher, Route
from witdialog.agents.handlers import ActionRegistry, merge_entities
from witdialog.agents.trace import log_trace

__all__ = [
    "ActionHandler",
    "ActionRegistry",
    "ConverseClient",
    "ConverseResponse",
    "ConversationContext",
    "DispatchError",
    "DispatchResult",
    "Dispatcher",
    "MessageResponse",
    "OutcomeKind",
    "ResponseDecoder",
    "ResponseType",
    "Route",
    "STOPPED_KEY",
    "Session",
    "TraceEvent",
    "TurnOutcome",
    "WitResponseDecoder",
    "clear_stopped",
    "is_stopped",
    "log_trace",
    "mark_stopped",
    "merge_entities",
    "new_context",
]
