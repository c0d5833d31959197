"""EventBus — optional observer hook for load, merge and pack progress."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

logger = logging.getLogger(__name__)

# Type alias for event handler callbacks.
EventHandler = Any  # Callable[..., None]

PROGRESS = "progress"
COMPLETED = "completed"


class EventBus:
    """Publish/subscribe bus used by the tools to report progress.

    Library functions emit ``"progress"`` once per decoded block, merged
    frame or placed frame, and ``"completed"`` once at the end.  A failing
    handler is logged and never interrupts the operation that emitted.
    """

    def __init__(self) -> None:
        """Initialise a bus with no handlers."""
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> None:
        """Register *handler* for *event*.

        Args:
            event: Event name, usually ``PROGRESS`` or ``COMPLETED``.
            handler: Callable receiving the event payload as keyword arguments.
        """
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        """Remove a previously registered handler.

        Args:
            event: The event name.
            handler: The handler to remove.
        """
        try:
            self._handlers[event].remove(handler)
        except ValueError:
            logger.warning("Handler %r was not subscribed to event %r", handler, event)

    def emit(self, event: str, **kwargs: Any) -> None:
        """Call every handler subscribed to *event* with *kwargs*."""
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(**kwargs)
            except Exception:
                logger.exception("Error in handler %r for event %r", handler, event)

    def progress(self, tool: str, current: int, total: int, message: str) -> None:
        """Emit a ``progress`` event with the standard payload."""
        self.emit(PROGRESS, tool=tool, current=current, total=total, message=message)

    def completed(self, tool: str, message: str) -> None:
        """Emit a ``completed`` event with the standard payload."""
        self.emit(COMPLETED, tool=tool, message=message)
