"""Shared types for the converse dispatch loop."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

ConversationContext = dict[str, Any]


@dataclass(frozen=True)
class Session:
    """Credentials and conversation id for one dialogue."""

    access_token: str
    session_id: str


class ResponseType(str, Enum):
    """Response variants returned by the converse API."""

    MESSAGE = "msg"
    MERGE = "merge"
    ACTION = "action"
    STOP = "stop"


@dataclass
class ConverseResponse:
    """
    Decoded converse response.

    ``type`` is None for the empty response, which is neither actionable nor a stop.
    """

    type: ResponseType | None = None
    msg: str | None = None
    action: str | None = None
    entities: dict[str, Any] = field(default_factory=dict)
    confidence: float | None = None
    quickreplies: list[str] | None = None

    @property
    def is_empty(self) -> bool:
        return self.type is None


@dataclass
class MessageResponse:
    """Decoded result of the message API."""

    msg_id: str | None = None
    text: str | None = None
    entities: dict[str, Any] = field(default_factory=dict)


class OutcomeKind(str, Enum):
    """Raw result categories of a single client call."""

    OK = "ok"
    STOPPED = "stopped"
    ERROR = "error"


@dataclass(frozen=True)
class TurnOutcome:
    """Raw result of one client call, before decoding."""

    kind: OutcomeKind
    payload: Any = None
    error_code: str | None = None

    @classmethod
    def ok(cls, payload: Any) -> "TurnOutcome":
        return cls(kind=OutcomeKind.OK, payload=payload)

    @classmethod
    def stopped(cls) -> "TurnOutcome":
        return cls(kind=OutcomeKind.STOPPED)

    @classmethod
    def transport_error(cls, error_code: str, payload: Any = None) -> "TurnOutcome":
        return cls(kind=OutcomeKind.ERROR, payload=payload, error_code=error_code)


class DispatchError(str, Enum):
    """Terminal failures of a dispatch run."""

    INVALID_MAX_STEPS = "invalid_max_steps"
    MAX_STEPS_REACHED = "max_steps_reached"


@dataclass
class DispatchResult:
    """Outcome of a full dispatch run."""

    context: ConversationContext
    error: DispatchError | None = None
    steps: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class TraceEvent:
    """Observability record emitted at dispatch transitions."""

    stage: str
    step: int
    budget: int
    variant: str | None = None
    action_kind: str | None = None


class ConverseClient(Protocol):
    """Interface for issuing one converse request per turn."""

    def converse(
        self, session: Session, text: str, context: ConversationContext
    ) -> TurnOutcome:  # pragma: no cover - interface
        """Send the turn and return the raw outcome without raising on service errors."""
        ...


class ResponseDecoder(Protocol):
    """Interface for turning raw payloads into typed responses."""

    def decode(self, payload: Any) -> ConverseResponse:  # pragma: no cover - interface
        """Decode a payload, returning the empty response for empty or malformed input."""
        ...


class ActionHandler(Protocol):
    """
    Caller-supplied capability that executes actions.

    ``action_kind`` is ``"say"``, ``"merge"``, ``"error"`` or a custom action name.
    Implementations set ``context["stopped"] = True`` to end the dialogue early.
    """

    def call_action(
        self,
        action_kind: str,
        session_id: str,
        context: ConversationContext,
        payload: Any,
        options: dict[str, Any],
    ) -> ConversationContext:  # pragma: no cover - interface
        """Run the action and return the updated context."""
        ...


class TraceHook(Protocol):
    """Observability hook invoked at dispatch transitions."""

    def __call__(self, event: TraceEvent) -> None:  # pragma: no cover - interface
        ...
