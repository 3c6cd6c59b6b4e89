"""Publish/subscribe bus for engine lifecycle events."""

import logging
from collections.abc import Callable
from typing import Any, Literal, overload

from probe_engine.models.events import (
    EngineEvent,
    EventName,
    RunCancelled,
    RunComplete,
    RunError,
    RunStart,
    TestComplete,
    TestStart,
)

log = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """Dispatches events to handlers subscribed by event name.

    A failing handler is logged and skipped; it never stops delivery to the
    remaining handlers or reaches the publisher.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventName, list[Handler]] = {}

    @overload
    def on(
        self, event_name: Literal["run_start"], handler: Callable[[RunStart], None]
    ) -> None: ...
    @overload
    def on(
        self, event_name: Literal["test_start"], handler: Callable[[TestStart], None]
    ) -> None: ...
    @overload
    def on(
        self,
        event_name: Literal["test_complete"],
        handler: Callable[[TestComplete], None],
    ) -> None: ...
    @overload
    def on(
        self,
        event_name: Literal["run_complete"],
        handler: Callable[[RunComplete], None],
    ) -> None: ...
    @overload
    def on(
        self, event_name: Literal["run_error"], handler: Callable[[RunError], None]
    ) -> None: ...
    @overload
    def on(
        self,
        event_name: Literal["run_cancelled"],
        handler: Callable[[RunCancelled], None],
    ) -> None: ...
    @overload
    def on(self, event_name: EventName, handler: Handler) -> None: ...
    def on(self, event_name: EventName, handler: Handler) -> None:
        self._handlers.setdefault(event_name, []).append(handler)

    def off(self, event_name: EventName, handler: Handler) -> None:
        """Unsubscribe a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: EngineEvent) -> None:
        for handler in tuple(self._handlers.get(event.name, ())):
            try:
                handler(event)
            except Exception:
                log.exception("Event handler failed for %s", event.name)
