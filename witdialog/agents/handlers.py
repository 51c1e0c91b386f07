"""Action handler implementations."""

from typing import Any, Callable

from loguru import logger

from witdialog.agents.types import ConverseResponse, ConversationContext

ActionFn = Callable[[str, ConversationContext, dict[str, Any]], ConversationContext]
SayFn = Callable[[str], None]


def merge_entities(
    context: ConversationContext, entities: dict[str, Any]
) -> ConversationContext:
    """
    Fold the first value of each entity into a copy of the context.

    Args:
        context (ConversationContext): The current context.
        entities (dict[str, Any]): Entities as returned by the converse API.

    Returns:
        ConversationContext: The merged copy.
    """
    merged = dict(context)
    for name, values in entities.items():
        if isinstance(values, list) and values:
            first = values[0]
            merged[name] = first.get("value") if isinstance(first, dict) else first
        elif isinstance(values, dict):
            merged[name] = values.get("value")
    return merged


class ActionRegistry:
    """
    Action handler backed by a registry of custom action callables.

    ``say`` goes to the configured output, ``merge`` folds entities into the context,
    and ``error`` is logged and reported. Unknown custom actions leave the context as is.
    """

    def __init__(self, say: SayFn | None = None) -> None:
        """
        Initialize the ActionRegistry.

        Args:
            say (SayFn | None, optional): Output for messages. Defaults to print.
        """
        self.say = say or print
        self._actions: dict[str, ActionFn] = {}

    def register(self, name: str, fn: ActionFn) -> None:
        """
        Register a custom action by name.

        Args:
            name (str): The action name sent by the service.
            fn (ActionFn): Callable taking (session_id, context, options) and returning a context.
        """
        if name in {"say", "merge", "error"}:
            raise ValueError(f"'{name}' is a built-in action kind")
        self._actions[name] = fn

    def list_actions(self) -> list[str]:
        """
        Return registered custom action names.

        Returns:
            list[str]: Sorted action names.
        """
        return sorted(self._actions.keys())

    def call_action(
        self,
        action_kind: str,
        session_id: str,
        context: ConversationContext,
        payload: Any,
        options: dict[str, Any],
    ) -> ConversationContext:
        if action_kind == "say":
            return self._say(context, payload)
        if action_kind == "merge":
            entities = payload.entities if isinstance(payload, ConverseResponse) else {}
            return merge_entities(context, entities)
        if action_kind == "error":
            code, detail = payload
            logger.error("Converse error {} in session {}: {}", code, session_id, detail)
            self.say(f"! error: {code}")
            return context

        fn = self._actions.get(action_kind)
        if fn is None:
            logger.warning("No handler registered for action {!r}", action_kind)
            return context
        return fn(session_id, context, options)

    def _say(self, context: ConversationContext, response: Any) -> ConversationContext:
        if isinstance(response, ConverseResponse) and response.msg:
            line = response.msg
            if response.quickreplies:
                line = f"{line} [{' | '.join(response.quickreplies)}]"
            self.say(line)
        return context
