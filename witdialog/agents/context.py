"""Conversation context helpers."""

from typing import Any

from witdialog.agents.types import ConversationContext

STOPPED_KEY = "stopped"


def new_context(**fields: Any) -> ConversationContext:
    """
    Create a fresh conversation context.

    Args:
        **fields (Any): Initial context entries.

    Returns:
        ConversationContext: The new context mapping.
    """
    return dict(fields)


def is_stopped(context: ConversationContext | None) -> bool:
    """
    Check the reserved ``stopped`` flag.

    Args:
        context (ConversationContext | None): The context to inspect.

    Returns:
        bool: True only when the flag is set to True.
    """
    return bool(context) and context.get(STOPPED_KEY) is True


def mark_stopped(context: ConversationContext) -> ConversationContext:
    """
    Return a copy of the context with the ``stopped`` flag set.

    Args:
        context (ConversationContext): The context to copy.

    Returns:
        ConversationContext: The stopped copy.
    """
    return {**context, STOPPED_KEY: True}


def clear_stopped(context: ConversationContext) -> ConversationContext:
    """
    Return a copy of the context without the ``stopped`` flag.

    Args:
        context (ConversationContext): The context to copy.

    Returns:
        ConversationContext: The copy, ready for a new run.
    """
    return {k: v for k, v in context.items() if k != STOPPED_KEY}
