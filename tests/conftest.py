from typing import Any, Callable

import pytest

from witdialog.agents.types import ConversationContext, Session, TurnOutcome


class ScriptedClient:
    """
    Converse client that replays a fixed list of outcomes.
    """

    def __init__(self, outcomes: list[TurnOutcome]) -> None:
        """
        Initialize the ScriptedClient.

        Args:
            outcomes (list[TurnOutcome]): Outcomes returned in order; the last one repeats.
        """
        self.outcomes = list(outcomes)
        self.calls: list[tuple[Session, str, ConversationContext]] = []

    def converse(
        self, session: Session, text: str, context: ConversationContext
    ) -> TurnOutcome:
        self.calls.append((session, text, context))
        index = min(len(self.calls) - 1, len(self.outcomes) - 1)
        return self.outcomes[index]


class RecordingHandler:
    """
    Action handler that records every call and applies optional per-kind updates.
    """

    def __init__(
        self,
        updates: dict[str, Callable[[ConversationContext], ConversationContext]]
        | None = None,
    ) -> None:
        self.updates = updates or {}
        self.calls: list[tuple[str, str, ConversationContext, Any]] = []

    def call_action(
        self,
        action_kind: str,
        session_id: str,
        context: ConversationContext,
        payload: Any,
        options: dict[str, Any],
    ) -> ConversationContext:
        self.calls.append((action_kind, session_id, context, payload))
        update = self.updates.get(action_kind)
        return update(context) if update else context

    def kinds(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def session() -> Session:
    return Session(access_token="token", session_id="s1")


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_client() -> Callable[..., ScriptedClient]:
    """
    Factory fixture for scripted converse clients.

    Returns:
        Callable[..., ScriptedClient]: Builds a client from outcomes.
    """

    def _make(*outcomes: TurnOutcome) -> ScriptedClient:
        return ScriptedClient(list(outcomes))

    return _make


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """
    Factory fixture for recording handlers with per-kind context updates.

    Returns:
        Callable[..., RecordingHandler]: Builds a handler from keyword updates.
    """

    def _make(**updates: Callable[[ConversationContext], ConversationContext]):
        return RecordingHandler(updates)

    return _make
