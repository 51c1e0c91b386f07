"""Observability hooks for the dispatch loop."""

from loguru import logger

from witdialog.agents.types import TraceEvent, TraceHook


def log_trace(event: TraceEvent) -> None:
    """
    Default trace hook that writes dispatch transitions to the log.

    Args:
        event (TraceEvent): The transition to record.
    """
    logger.debug(
        "[{}] step={} budget={} variant={} action={}",
        event.stage,
        event.step,
        event.budget,
        event.variant,
        event.action_kind,
    )


def emit(hook: TraceHook | None, event: TraceEvent) -> None:
    """
    Deliver an event to the hook; hook failures are logged and never propagate.

    Args:
        hook (TraceHook | None): The hook to call, if any.
        event (TraceEvent): The event to deliver.
    """
    if hook is None:
        return
    try:
        hook(event)
    except Exception as e:
        logger.warning("Trace hook failed on {} event: {}", event.stage, e)
