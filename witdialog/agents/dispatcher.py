"""Action dispatch loop that drives a multi-turn converse session."""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from witdialog.agents.context import is_stopped
from witdialog.agents.decoder import WitResponseDecoder
from witdialog.agents.trace import emit, log_trace
from witdialog.agents.types import (
    ActionHandler,
    ConverseClient,
    ConverseResponse,
    ConversationContext,
    DispatchError,
    DispatchResult,
    OutcomeKind,
    ResponseDecoder,
    ResponseType,
    Session,
    TraceEvent,
    TraceHook,
    TurnOutcome,
)

_HANDLER_KINDS = {
    ResponseType.MESSAGE: "say",
    ResponseType.MERGE: "merge",
}


@dataclass
class Route:
    """Result of routing one decoded response."""

    context: ConversationContext
    finished: bool = False
    action_kind: str | None = None


class Dispatcher:
    """
    Run converse turns until the service stops, the handler stops, or the budget runs out.
    """

    def __init__(
        self,
        client: ConverseClient,
        decoder: ResponseDecoder | None = None,
        trace: TraceHook | None = log_trace,
    ) -> None:
        """
        Initialize the Dispatcher.

        Args:
            client (ConverseClient): Client issuing one request per turn.
            decoder (ResponseDecoder | None, optional): Payload decoder. Defaults to WitResponseDecoder.
            trace (TraceHook | None, optional): Observability hook. Defaults to log_trace.
        """
        self.client = client
        self.decoder = decoder or WitResponseDecoder()
        self.trace = trace

    def run(
        self,
        session: Session,
        handler: ActionHandler,
        text: str = "",
        context: ConversationContext | None = None,
        max_steps: int = 5,
        options: dict[str, Any] | None = None,
    ) -> DispatchResult:
        """
        Drive the dialogue until a terminal condition is reached.

        Args:
            session (Session): Access token and session id.
            handler (ActionHandler): Executes say/merge/error/custom actions.
            text (str, optional): User text for the first turn only. Defaults to "".
            context (ConversationContext | None, optional): Starting context. Defaults to None.
            max_steps (int, optional): Maximum number of continuing turns. Defaults to 5.
            options (dict[str, Any] | None, optional): Passed through to the handler. Defaults to None.

        Returns:
            DispatchResult: Final context and, on failure, the dispatch error.
        """
        context = {} if context is None else context
        options = options or {}

        if max_steps <= 0:
            logger.error("Invalid max_steps {}", max_steps)
            self._emit(
                "terminal", 0, max_steps, variant=DispatchError.INVALID_MAX_STEPS.value
            )
            return DispatchResult(context=context, error=DispatchError.INVALID_MAX_STEPS)

        budget = max_steps
        step = 0
        while True:
            if is_stopped(context):
                logger.debug("Stopping further converse requests")
                self._emit("terminal", step, budget, variant="stopped")
                return DispatchResult(context=context, steps=step)

            if budget <= 0:
                logger.error("Force stopped after reaching max steps")
                self._emit("terminal", step, budget, variant="max_steps_reached")
                return DispatchResult(
                    context=context, error=DispatchError.MAX_STEPS_REACHED, steps=step
                )

            step += 1
            self._emit("turn", step, budget)
            outcome = self.client.converse(session, text, context)

            if outcome.kind is OutcomeKind.ERROR:
                self._emit(
                    "error", step, budget, variant=outcome.error_code, action_kind="error"
                )
                context = self.escalate(session, handler, context, outcome, options)
                self._emit("terminal", step, budget, variant=OutcomeKind.ERROR.value)
                return DispatchResult(context=context, steps=step)

            response = self.resolve(outcome)
            budget -= 1
            route = self.route(session, handler, context, response, options)
            self._emit(
                "dispatch",
                step,
                budget,
                variant=response.type.value if response.type else None,
                action_kind=route.action_kind,
            )
            context = route.context
            if route.finished:
                self._emit("terminal", step, budget, variant=ResponseType.STOP.value)
                return DispatchResult(context=context, steps=step)
            text = ""

    def resolve(self, outcome: TurnOutcome) -> ConverseResponse:
        """
        Turn a non-error outcome into a response; a stopped outcome is the empty response.

        Args:
            outcome (TurnOutcome): The raw client outcome.

        Returns:
            ConverseResponse: The decoded response.
        """
        if outcome.kind is OutcomeKind.STOPPED:
            return ConverseResponse()
        return self.decoder.decode(outcome.payload)

    def route(
        self,
        session: Session,
        handler: ActionHandler,
        context: ConversationContext,
        response: ConverseResponse,
        options: dict[str, Any],
    ) -> Route:
        """
        Dispatch a decoded response to the matching handler action.

        Args:
            session (Session): The running session.
            handler (ActionHandler): The action handler.
            context (ConversationContext): Context before the action.
            response (ConverseResponse): The decoded response.
            options (dict[str, Any]): Handler options.

        Returns:
            Route: The updated context and whether the run is finished.
        """
        if response.type is ResponseType.STOP:
            logger.debug('Got converse type "stop"')
            return Route(context=context, finished=True)

        if response.type is ResponseType.ACTION:
            logger.debug('Got converse type "action": {}', response.action)
            updated = handler.call_action(
                response.action, session.session_id, context, None, options
            )
            return Route(context=updated, action_kind=response.action)

        kind = _HANDLER_KINDS.get(response.type) if response.type else None
        if kind is None:
            logger.debug("Got empty converse response, continuing")
            return Route(context=context)

        logger.debug('Got converse type "{}"', response.type.value)
        updated = handler.call_action(kind, session.session_id, context, response, options)
        return Route(context=updated, action_kind=kind)

    def escalate(
        self,
        session: Session,
        handler: ActionHandler,
        context: ConversationContext,
        outcome: TurnOutcome,
        options: dict[str, Any],
    ) -> ConversationContext:
        """
        Hand a transport error to the handler's ``"error"`` action, without consuming budget.

        Args:
            session (Session): The running session.
            handler (ActionHandler): The action handler.
            context (ConversationContext): Context at the time of the error.
            outcome (TurnOutcome): The error outcome.
            options (dict[str, Any]): Handler options.

        Returns:
            ConversationContext: The handler's result.
        """
        logger.debug("Calling the error handler for {}", outcome.error_code)
        return handler.call_action(
            "error",
            session.session_id,
            context,
            (outcome.error_code, outcome.payload),
            options,
        )

    def _emit(
        self,
        stage: str,
        step: int,
        budget: int,
        variant: str | None = None,
        action_kind: str | None = None,
    ) -> None:
        emit(
            self.trace,
            TraceEvent(
                stage=stage,
                step=step,
                budget=budget,
                variant=variant,
                action_kind=action_kind,
            ),
        )
