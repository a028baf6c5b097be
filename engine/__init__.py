"""
Dialogue host engine.

Host services for the dialogue system: the game loop, the tick
scheduler, keyboard input, the event bus and presentation panels.

Quick Start:
    from engine.core import Game, GameConfig
    from engine.ui import PygamePanel

    game = Game(GameConfig(title="My Game", width=1280, height=720))
    panel = PygamePanel()
    game.add_drawable(panel)
    game.run()
"""

__version__ = "0.2.0"

from engine.core import (
    Game,
    GameConfig,
    Scheduler,
    ScheduledCall,
    EventBus,
    Event,
    GameEvent,
    EngineEvent,
    UIEvent,
    DialogueEvent,
)

from engine.input import InputHandler

__all__ = [
    # Core
    "Game",
    "GameConfig",
    "Scheduler",
    "ScheduledCall",
    # Events
    "EventBus",
    "Event",
    "GameEvent",
    "EngineEvent",
    "UIEvent",
    "DialogueEvent",
    # Input
    "InputHandler",
]
