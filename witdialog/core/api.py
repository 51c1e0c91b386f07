"""Module-level shortcuts over the client, decoder, and dispatcher."""

from typing import Any

from witdialog.agents.decoder import WitResponseDecoder
from witdialog.agents.dispatcher import Dispatcher
from witdialog.agents.types import (
    ActionHandler,
    ConverseResponse,
    ConversationContext,
    DispatchResult,
    MessageResponse,
    OutcomeKind,
    Session,
)
from witdialog.core.client import WitClient
from witdialog.core.errors import WitAPIError

_decoder = WitResponseDecoder()


def message(
    access_token: str,
    text: str,
    context: ConversationContext | None = None,
    thread_id: str = "",
    msg_id: str = "",
    total_outcomes: int = 1,
    client: WitClient | None = None,
) -> MessageResponse:
    """
    Call the message API.

    Raises:
        WitAPIError: If the service or transport reports an error.
    """
    client = client or WitClient()
    outcome = client.message(access_token, text, context, thread_id, msg_id, total_outcomes)
    if outcome.kind is OutcomeKind.ERROR:
        raise WitAPIError(outcome.error_code or "unknown", outcome.payload)
    return _decoder.decode_message(outcome.payload)


def converse(
    access_token: str,
    session_id: str,
    text: str = "",
    context: ConversationContext | None = None,
    client: WitClient | None = None,
) -> ConverseResponse:
    """
    Call the converse API once; stopped and failed calls yield the empty response.
    """
    client = client or WitClient()
    outcome = client.converse(Session(access_token, session_id), text, context or {})
    if outcome.kind is not OutcomeKind.OK:
        return ConverseResponse()
    return _decoder.decode(outcome.payload)


def run_actions(
    access_token: str,
    session_id: str,
    handler: ActionHandler,
    text: str = "",
    context: ConversationContext | None = None,
    max_steps: int = 5,
    options: dict[str, Any] | None = None,
    client: WitClient | None = None,
) -> DispatchResult:
    """
    Run the converse loop with the given action handler.
    """
    dispatcher = Dispatcher(client or WitClient(), decoder=_decoder)
    return dispatcher.run(
        Session(access_token, session_id),
        handler,
        text=text,
        context=context,
        max_steps=max_steps,
        options=options,
    )
