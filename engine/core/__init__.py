"""
Core engine module.

Exports:
- Game, GameConfig: Game loop host and configuration
- Scheduler, ScheduledCall: Tick-driven callbacks and cancellable delays
- EventBus, Event: Typed publish/subscribe
- GameEvent: Named one-shot trigger channel
- EngineEvent, UIEvent, DialogueEvent: Built-in event types
"""

from engine.core.game import Game, GameConfig
from engine.core.scheduler import Scheduler, ScheduledCall
from engine.core.events import (
    EventBus,
    Event,
    GameEvent,
    EngineEvent,
    UIEvent,
    DialogueEvent,
)

__all__ = [
    # Game
    "Game",
    "GameConfig",
    # Scheduling
    "Scheduler",
    "ScheduledCall",
    # Events
    "EventBus",
    "Event",
    "GameEvent",
    "EngineEvent",
    "UIEvent",
    "DialogueEvent",
]
