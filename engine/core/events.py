"""
Typed event bus and one-shot trigger channels.

Two kinds of messaging live here:

- EventBus: Enum-typed publish/subscribe for engine-wide notifications
  (window opened, paragraph finished, key pressed, ...).
- GameEvent: a named broadcast channel that listeners register with
  directly and that carries no payload. Dialogue paragraphs use these
  as external advancement triggers ("door_opened", "boss_defeated").

Usage:
    # Bus
    event_bus.subscribe(DialogueEvent.WINDOW_CLOSED, on_closed)
    event_bus.publish(DialogueEvent.WINDOW_CLOSED, exhausted=True)

    # Trigger channel
    door_opened = GameEvent("door_opened")
    door_opened.register_listener(on_door)
    door_opened.raise_event()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Built-in engine events."""
    GAME_START = auto()
    GAME_PAUSE = auto()
    GAME_RESUME = auto()
    GAME_QUIT = auto()


class UIEvent(Enum):
    """UI system events."""
    DIALOG_STARTED = auto()
    DIALOG_ENDED = auto()


class DialogueEvent(Enum):
    """Events published by dialogue windows."""
    WINDOW_OPENED = auto()
    WINDOW_CLOSED = auto()
    PARAGRAPH_STARTED = auto()
    PARAGRAPH_FINISHED = auto()
    CONFIGURATION_ERROR = auto()
    CALLBACK_ERROR = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Handlers called in subscription order
    - One-shot handlers
    - Events published while dispatching are queued
    """

    def __init__(self):
        # event type -> list of (handler, one_shot)
        self._handlers: dict[Enum, list[tuple[EventHandler, bool]]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(self, event_type: Enum, handler: EventHandler, one_shot: bool = False) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            one_shot: If True, handler is removed after first call
        """
        self._handlers.setdefault(event_type, []).append((handler, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            entry for entry in self._handlers[event_type] if entry[0] != handler
        ]

    def handler_count(self, event_type: Enum) -> int:
        """Number of handlers for an event type."""
        return len(self._handlers.get(event_type, []))

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers.
        """
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers."""
        handlers = self._handlers.get(event.type)
        if not handlers:
            return

        self._is_publishing = True
        spent = []

        try:
            for entry in list(handlers):
                handler, one_shot = entry
                try:
                    handler(event)
                except Exception:
                    logger.exception("Error in event handler for %s", event.type)

                if one_shot:
                    spent.append(entry)
        finally:
            for entry in spent:
                if entry in handlers:
                    handlers.remove(entry)
            self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))


TriggerListener = Callable[[], None]


class GameEvent:
    """
    Named one-shot broadcast channel.

    Listeners are zero-argument callables. Each call to raise_event()
    notifies every listener registered at the time of the raise;
    listeners may unregister themselves (or others) while being notified.
    """

    def __init__(self, name: str):
        self.name = name
        self._listeners: list[TriggerListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def register_listener(self, listener: TriggerListener) -> None:
        """Register a listener. Registering the same listener twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_listener(self, listener: TriggerListener) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def raise_event(self) -> None:
        """Notify all registered listeners."""
        logger.debug("GameEvent '%s' raised (%d listeners)", self.name, len(self._listeners))
        for listener in list(self._listeners):
            listener()

    def __repr__(self) -> str:
        return f"GameEvent({self.name!r})"
