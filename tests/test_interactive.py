from typing import Any

import pytest

import witdialog.cli.interactive as interactive_cli
from witdialog.agents import (
    STOPPED_KEY,
    DispatchError,
    DispatchResult,
    Dispatcher,
    Session,
    TurnOutcome,
    mark_stopped,
)


class _FakeDispatcher:
    def __init__(self, results: list[DispatchResult]) -> None:
        self.results = results
        self.runs: list[dict[str, Any]] = []

    def run(self, session, handler, text="", context=None, max_steps=5, options=None):
        self.runs.append({"text": text, "context": context, "max_steps": max_steps})
        return self.results.pop(0)


def _reader(lines: list[str]):
    feed = iter(lines)
    prompts: list[str] = []

    def _read(prompt: str) -> str:
        prompts.append(prompt)
        return next(feed)

    return _read, prompts


def test_interactive_threads_context_and_exits() -> None:
    """
    Test that each line is dispatched and a blank line followed by y exits.
    """
    dispatcher = _FakeDispatcher(
        [
            DispatchResult(context={"turn": 1}),
            DispatchResult(context={"turn": 2}, error=DispatchError.MAX_STEPS_REACHED),
        ]
    )
    read, prompts = _reader(["hello\n", "again", "", "y"])

    ctx = interactive_cli.interactive(
        dispatcher, Session("t", "s"), handler=None, max_steps=3, read=read  # type: ignore[arg-type]
    )

    assert ctx == {"turn": 2}
    assert [r["text"] for r in dispatcher.runs] == ["hello", "again"]
    assert dispatcher.runs[1]["context"] == {"turn": 1}
    assert dispatcher.runs[0]["max_steps"] == 3
    assert prompts[-1] == interactive_cli.EXIT_PROMPT


def test_exit_prompt_repeats_until_answered() -> None:
    """
    Test that invalid answers re-prompt and n resumes the conversation.
    """
    dispatcher = _FakeDispatcher([DispatchResult(context={"x": 1})])
    read, prompts = _reader(["", "maybe", "n", "hi", "", "Y"])

    ctx = interactive_cli.interactive(
        dispatcher, Session("t", "s"), handler=None, read=read  # type: ignore[arg-type]
    )

    assert ctx == {"x": 1}
    assert prompts.count(interactive_cli.EXIT_PROMPT) == 3


def test_main_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Test that main exits when no access token is configured.

    Args:
        monkeypatch (pytest.MonkeyPatch): The monkeypatch fixture.
    """
    monkeypatch.setenv("WIT_ACCESS_TOKEN", "")
    monkeypatch.setattr(interactive_cli, "setup_logging", lambda: None)
    monkeypatch.setattr(interactive_cli, "load_dotenv", lambda: None)

    with pytest.raises(SystemExit):
        interactive_cli.main()


def test_lines_after_stopped_dialogue_reach_client(
    session, make_client, make_handler
) -> None:
    """
    Test that a handler stopping one dialogue does not swallow later console lines.

    Args:
        session (Session): The session fixture.
        make_client: Factory for scripted clients.
        make_handler: Factory for recording handlers.
    """
    client = make_client(TurnOutcome.ok({"type": "action", "action": "done"}))
    handler = make_handler(done=mark_stopped)
    read, _ = _reader(["first", "second", "third", "", "y"])

    ctx = interactive_cli.interactive(
        Dispatcher(client), session, handler, context={"user": "ada"}, read=read
    )

    assert [call[1] for call in client.calls] == ["first", "second", "third"]
    assert all(STOPPED_KEY not in call[2] for call in client.calls)
    assert handler.kinds() == ["done", "done", "done"]
    assert ctx == {"user": "ada"}
