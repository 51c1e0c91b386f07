import sys
import uuid
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
from loguru import logger

from witdialog.agents.dispatcher import Dispatcher
from witdialog.agents.context import clear_stopped, new_context
from witdialog.agents.handlers import ActionRegistry
from witdialog.agents.types import ActionHandler, ConversationContext, Session
from witdialog.core.client import WitClient
from witdialog.utils.env_cfg import load_wit_env
from witdialog.utils.logging_cfg import setup_logging

PROMPT = "> "
EXIT_PROMPT = "> Do you want to exit? (y/n) "


def _confirm_exit(read: Callable[[str], str]) -> bool:
    """
    Ask until the user answers y or n.

    Args:
        read (Callable[[str], str]): Input function.

    Returns:
        bool: True if the user wants to exit.
    """
    while True:
        answer = read(EXIT_PROMPT).strip().lower()
        if answer == "y":
            return True
        if answer == "n":
            return False


def interactive(
    dispatcher: Dispatcher,
    session: Session,
    handler: ActionHandler,
    context: ConversationContext | None = None,
    max_steps: int = 5,
    read: Callable[[str], str] = input,
) -> ConversationContext:
    """
    Feed console lines into the dispatcher until the user confirms exit on an empty line.

    Args:
        dispatcher (Dispatcher): The dispatcher driving each run.
        session (Session): The session to converse in.
        handler (ActionHandler): The action handler.
        context (ConversationContext | None, optional): Starting context. Defaults to None.
        max_steps (int, optional): Step budget per line. Defaults to 5.
        read (Callable[[str], str], optional): Input function. Defaults to input.

    Returns:
        ConversationContext: The context when the user exits.
    """
    context = context or new_context()
    while True:
        text = read(PROMPT).strip()
        if not text:
            if _confirm_exit(read):
                return context
            continue
        result = dispatcher.run(
            session, handler, text=text, context=context, max_steps=max_steps
        )
        if not result.ok:
            logger.warning("Run ended with {} after {} steps", result.error, result.steps)
        # a stopped dialogue ends the run, not the console session
        context = clear_stopped(result.context)


def main() -> None:
    """
    Entry point for the interactive console.
    """
    load_dotenv()
    setup_logging()
    config = load_wit_env()
    if not config.access_token:
        logger.error("WIT_ACCESS_TOKEN is not set")
        sys.exit(1)

    session = Session(access_token=config.access_token, session_id=str(uuid.uuid4()))
    logger.info("Starting interactive session {}", session.session_id)
    with WitClient(config) as client:
        try:
            interactive(
                Dispatcher(client),
                session,
                ActionRegistry(),
                max_steps=config.max_steps,
            )
        except (EOFError, KeyboardInterrupt):
            logger.info("Input closed, exiting.")
    logger.info("Session {} finished.", session.session_id)


if __name__ == "__main__":
    sys.path.append(str(Path(__file__).parents[2].resolve()))
    main()
