import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine and dialogue modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.quit'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.mixer'), \
         patch('pygame.image'), \
         patch('pygame.key'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)

        yield

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def scheduler():
    """Fresh Scheduler for each test."""
    from engine.core.scheduler import Scheduler
    return Scheduler()

@pytest.fixture
def input_handler(event_bus):
    """Keyboard handler publishing to the test event bus."""
    from engine.input.handler import InputHandler
    return InputHandler(event_bus)

@pytest.fixture
def services(scheduler, input_handler, event_bus):
    """Dialogue services wired to the test scheduler, input and bus."""
    from dialogue.services import DialogueServices
    return DialogueServices(scheduler=scheduler, input=input_handler, events=event_bus)

@pytest.fixture
def panel():
    """In-memory panel that records body updates."""
    from engine.ui.panel import RecordingPanel
    return RecordingPanel()

@pytest.fixture
def manager(services, panel):
    """DialogueManager that always hands out the test panel."""
    from dialogue.manager import DialogueManager
    return DialogueManager(services, panel_factory=lambda: panel)

@pytest.fixture
def run_for(services):
    """
    Advance simulated time the way Game.fixed_update does.

    Usage:
        run_for(0.5)             # 10 ticks of 0.05s
        run_for(0.1, dt=0.01)
    """
    def _run(seconds, dt=0.05):
        steps = int(round(seconds / dt))
        for _ in range(steps):
            services.input.update()
            services.scheduler.tick(dt)
    return _run

@pytest.fixture
def tap(services):
    """Press and release a key within one tick."""
    def _tap(key, dt=0.05):
        services.input.press(key)
        services.input.update()
        services.scheduler.tick(dt)
        services.input.release(key)
        services.input.update()
        services.scheduler.tick(dt)
    return _tap
