"""
Keyboard input handler with per-tick edge detection.

Raw key state is fed in from pygame events (or press()/release() for
scripted input), and update() is called once at the start of every
fixed update to work out which keys went down or up since the last tick.

Usage:
    # In the game loop
    for event in pygame.event.get():
        input.process_event(event)
    input.update()

    # In game logic
    if input.is_key_just_pressed(pygame.K_z):
        window.fast_forward()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import pygame

from engine.core.events import EventBus


class InputEvent(Enum):
    """Input-specific events."""
    KEY_PRESSED = "input.key_pressed"
    KEY_RELEASED = "input.key_released"


@dataclass
class InputState:
    """Keyboard state for the current tick."""
    keys_pressed: set[int] = field(default_factory=set)
    keys_just_pressed: set[int] = field(default_factory=set)
    keys_just_released: set[int] = field(default_factory=set)


class InputHandler:
    """
    Tracks keyboard state and exposes newly pressed/released keys.

    No buffering: a key that goes down and up between two update()
    calls is never reported as pressed.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus
        self._state = InputState()
        self._prev_keys: set[int] = set()

    # Public API

    def is_key_pressed(self, key: int) -> bool:
        """Check if a key is currently held down."""
        return key in self._state.keys_pressed

    def is_key_just_pressed(self, key: int) -> bool:
        """Check if a key went down this tick."""
        return key in self._state.keys_just_pressed

    def is_key_just_released(self, key: int) -> bool:
        """Check if a key went up this tick."""
        return key in self._state.keys_just_released

    @property
    def state(self) -> InputState:
        return self._state

    # Raw input

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event."""
        if event.type == pygame.KEYDOWN:
            self.press(event.key)
        elif event.type == pygame.KEYUP:
            self.release(event.key)

    def press(self, key: int) -> None:
        """Mark a key as held down."""
        self._state.keys_pressed.add(key)

    def release(self, key: int) -> None:
        """Mark a key as released."""
        self._state.keys_pressed.discard(key)

    def release_all(self) -> None:
        """Release every held key (e.g. on focus loss)."""
        self._state.keys_pressed.clear()

    # Frame update

    def update(self) -> None:
        """
        Update input state for a new tick.

        Call this at the start of each fixed update.
        """
        self._state.keys_just_pressed = self._state.keys_pressed - self._prev_keys
        self._state.keys_just_released = self._prev_keys - self._state.keys_pressed

        if self.event_bus:
            for key in self._state.keys_just_pressed:
                self.event_bus.publish(InputEvent.KEY_PRESSED, key=key)
            for key in self._state.keys_just_released:
                self.event_bus.publish(InputEvent.KEY_RELEASED, key=key)

        self._prev_keys = self._state.keys_pressed.copy()
