"""
Paragraph data - one screen of dialogue text.

A paragraph carries its text, print rate, optional speaker and exactly
one advancement policy. The policy is a tagged union on `kind`, so a
paragraph can only ever hold the configuration it actually uses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Literal, Optional, Tuple, Union

import pygame
from pydantic import BaseModel, ConfigDict, Field, field_validator

from dialogue.strategies import (
    AdvancementStrategy,
    EventTriggeredStrategy,
    InputTriggeredStrategy,
    TimerTriggeredStrategy,
)
from dialogue.values import FloatReference
from engine.core.events import GameEvent

if TYPE_CHECKING:
    from dialogue.services import DialogueServices

MAX_TEXT_LENGTH = 140
DEFAULT_PRINT_RATE = 30.0
DEFAULT_ADVANCE_KEY = pygame.K_z

Callback = Callable[[], Any]


class Speaker(BaseModel):
    """
    Display identity for whoever is talking.

    Attributes:
        name: Shown in the window title
        name_color: RGB color of the title
        portrait: Image surface or asset path for the portrait slot
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    name_color: Tuple[int, int, int] = (255, 255, 255)
    portrait: Any = None


class EventAdvance(BaseModel):
    """Advance when an external GameEvent is raised."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra='forbid')

    kind: Literal["event"] = "event"
    trigger: Optional[GameEvent] = None

    def create_strategy(self, services: DialogueServices) -> AdvancementStrategy:
        return EventTriggeredStrategy(self.trigger)


class InputAdvance(BaseModel):
    """First press of `key` fast-forwards, the next press advances."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    kind: Literal["input"] = "input"
    key: int = DEFAULT_ADVANCE_KEY

    def create_strategy(self, services: DialogueServices) -> AdvancementStrategy:
        return InputTriggeredStrategy(self.key, services.input, services.scheduler)


class TimerAdvance(BaseModel):
    """Advance `duration` seconds after the text has finished printing."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    kind: Literal["timer"] = "timer"
    duration: FloatReference = Field(default_factory=lambda: FloatReference(constant=2.0))

    def create_strategy(self, services: DialogueServices) -> AdvancementStrategy:
        return TimerTriggeredStrategy(self.duration, services.scheduler)


AdvancePolicy = Union[EventAdvance, InputAdvance, TimerAdvance]


class Paragraph(BaseModel):
    """
    A skippable piece of dialogue shown in a single window screen.

    Attributes:
        text: The dialogue text (at most 140 characters)
        print_rate: Characters printed per second (constant or shared variable)
        speaker: Who is talking; None hides the title and portrait
        advance: How the paragraph moves on (event, input or timer)
        on_start_printing: Called when the paragraph starts printing in a window
        on_finish_printing: Called once when the paragraph is fully printed
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra='forbid')

    text: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    print_rate: FloatReference = Field(
        default_factory=lambda: FloatReference(constant=DEFAULT_PRINT_RATE)
    )
    speaker: Optional[Speaker] = None
    advance: AdvancePolicy = Field(default_factory=InputAdvance, discriminator="kind")
    on_start_printing: list[Callback] = Field(default_factory=list)
    on_finish_printing: list[Callback] = Field(default_factory=list)

    @field_validator('print_rate')
    @classmethod
    def _positive_constant_rate(cls, value: FloatReference) -> FloatReference:
        if value.is_constant and value.constant <= 0:
            raise ValueError("print_rate must be positive")
        return value

    @property
    def rate(self) -> float:
        """Current print rate in characters per second."""
        return self.print_rate.value

    def create_strategy(self, services: DialogueServices) -> AdvancementStrategy:
        """Build a fresh, unbound strategy for this paragraph's policy."""
        return self.advance.create_strategy(services)
