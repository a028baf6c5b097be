"""
Core Game class with fixed timestep game loop.

The Game class is the host for everything that needs time or input:
- Window creation (Pygame)
- Fixed timestep update loop (deterministic ticks for the scheduler)
- Variable render loop
- Global services: event bus, input, scheduler
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

import pygame

from engine.core.events import EngineEvent, EventBus
from engine.core.scheduler import Scheduler
from engine.input.handler import InputHandler

logger = logging.getLogger(__name__)


class Drawable(Protocol):
    def draw(self, surface: pygame.Surface) -> None: ...


class GameConfig:
    """Configuration for the game host."""

    def __init__(
        self,
        title: str = "Dialogue",
        width: int = 1280,
        height: int = 720,
        target_fps: int = 60,
        fixed_timestep: float = 1 / 60,
        max_frame_skip: int = 5,
        vsync: bool = True,
        fullscreen: bool = False,
        resizable: bool = False,
        clear_color: tuple[int, int, int] = (0, 0, 0),
    ):
        self.title = title
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.fixed_timestep = fixed_timestep
        self.max_frame_skip = max_frame_skip
        self.vsync = vsync
        self.fullscreen = fullscreen
        self.resizable = resizable
        self.clear_color = clear_color


class Game:
    """
    Main game host.

    Implements a fixed timestep loop with variable rendering. Each fixed
    update refreshes input edges first and then ticks the scheduler, so
    anything polled from a tick callback sees this tick's key presses.

    Usage:
        game = Game(GameConfig(title="My Game"))
        manager = DialogueManager(DialogueServices.from_game(game), ...)
        manager.play(sequence)
        game.run()
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self._running = False
        self._paused = False

        pygame.init()

        flags = 0
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN
        if self.config.resizable:
            flags |= pygame.RESIZABLE

        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags,
            vsync=int(self.config.vsync),
        )
        pygame.display.set_caption(self.config.title)

        # Core services
        self.event_bus = EventBus()
        self.input = InputHandler(self.event_bus)
        self.scheduler = Scheduler()

        self._drawables: list[Drawable] = []

        # Timing
        self._clock = pygame.time.Clock()
        self._accumulator = 0.0
        self._current_time = time.perf_counter()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    def add_drawable(self, drawable: Drawable) -> None:
        """Register something to draw every frame."""
        if drawable not in self._drawables:
            self._drawables.append(drawable)

    def remove_drawable(self, drawable: Drawable) -> None:
        if drawable in self._drawables:
            self._drawables.remove(drawable)

    def run(self) -> None:
        """
        Start the main game loop.

        Uses a fixed timestep for updates with variable rendering.
        """
        self._running = True
        self._current_time = time.perf_counter()
        self.event_bus.publish(EngineEvent.GAME_START)
        logger.info("Game loop started (%s)", self.config.title)

        while self._running:
            new_time = time.perf_counter()
            frame_time = new_time - self._current_time
            self._current_time = new_time

            # Prevent spiral of death
            if frame_time > 0.25:
                frame_time = 0.25

            self._accumulator += frame_time

            self._process_events()

            updates = 0
            while self._accumulator >= self.config.fixed_timestep:
                if not self._paused:
                    self.fixed_update(self.config.fixed_timestep)
                self._accumulator -= self.config.fixed_timestep
                updates += 1

                if updates >= self.config.max_frame_skip:
                    self._accumulator = 0
                    break

            self._render()
            self._clock.tick(self.config.target_fps)

        self._shutdown()

    def quit(self) -> None:
        """Request game shutdown."""
        self._running = False
        self.event_bus.publish(EngineEvent.GAME_QUIT)

    def pause(self) -> None:
        """Pause the game (stops fixed updates)."""
        self._paused = True
        self.event_bus.publish(EngineEvent.GAME_PAUSE)

    def resume(self) -> None:
        """Resume the game."""
        self._paused = False
        self.event_bus.publish(EngineEvent.GAME_RESUME)

    def fixed_update(self, dt: float) -> None:
        """
        One fixed timestep update.

        Args:
            dt: Fixed delta time (always config.fixed_timestep in run())
        """
        self.input.update()
        self.scheduler.tick(dt)

    def _process_events(self) -> None:
        """Process Pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.input.release_all()
            else:
                self.input.process_event(event)

    def _render(self) -> None:
        """Render the current frame."""
        self.screen.fill(self.config.clear_color)
        for drawable in list(self._drawables):
            drawable.draw(self.screen)
        pygame.display.flip()

    def _shutdown(self) -> None:
        """Clean shutdown."""
        self.scheduler.clear()
        self._drawables.clear()
        logger.info("Game loop stopped")
        pygame.quit()
