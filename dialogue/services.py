"""Host services shared by dialogue windows and their strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from engine.core.events import EventBus
from engine.core.scheduler import Scheduler
from engine.input.handler import InputHandler

if TYPE_CHECKING:
    from engine.core.game import Game


@dataclass
class DialogueServices:
    """
    What the dialogue system needs from its host.

    Attributes:
        scheduler: Tick source for printing, input polling and timers
        input: Keyboard state polled by input-triggered paragraphs
        events: Optional bus for lifecycle notifications and error reports
    """
    scheduler: Scheduler = field(default_factory=Scheduler)
    input: InputHandler = field(default_factory=InputHandler)
    events: Optional[EventBus] = None

    @classmethod
    def from_game(cls, game: Game) -> DialogueServices:
        return cls(scheduler=game.scheduler, input=game.input, events=game.event_bus)
