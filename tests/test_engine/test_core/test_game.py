import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock
import pygame

from engine.core.events import EngineEvent
from engine.core.game import Game, GameConfig

@pytest.fixture
def game():
    return Game(GameConfig(title="Test", width=320, height=240))

def test_game_config_defaults():
    config = GameConfig()
    assert config.fixed_timestep == pytest.approx(1 / 60)
    assert config.max_frame_skip == 5
    assert config.target_fps == 60

def test_game_creates_services(game):
    assert game.event_bus is game.input.event_bus
    assert game.scheduler.time == 0.0
    pygame.display.set_mode.assert_called_once()
    pygame.display.set_caption.assert_called_with("Test")

def test_fixed_update_refreshes_input_before_ticking(game):
    seen = []
    game.scheduler.add_tick_callback(
        lambda dt: seen.append(game.input.is_key_just_pressed(pygame.K_z))
    )

    game.input.press(pygame.K_z)
    game.fixed_update(1 / 60)
    game.fixed_update(1 / 60)

    assert seen == [True, False]
    assert game.scheduler.time == pytest.approx(2 / 60)

def test_process_events_feeds_input(game):
    pygame.event.get.return_value = [SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_z)]
    game._process_events()
    assert game.input.is_key_pressed(pygame.K_z)

    pygame.event.get.return_value = [SimpleNamespace(type=pygame.WINDOWFOCUSLOST)]
    game._process_events()
    assert not game.input.is_key_pressed(pygame.K_z)

def test_quit_event_stops_game(game):
    received = []
    game.event_bus.subscribe(EngineEvent.GAME_QUIT, received.append)
    pygame.event.get.return_value = [SimpleNamespace(type=pygame.QUIT)]

    game._process_events()

    assert not game.running
    assert len(received) == 1

def test_render_draws_registered_drawables(game):
    drawable = MagicMock()
    game.add_drawable(drawable)
    game.add_drawable(drawable)

    game._render()
    drawable.draw.assert_called_once_with(game.screen)

    game.remove_drawable(drawable)
    game._render()
    drawable.draw.assert_called_once()

def test_pause_stops_fixed_updates(game):
    game.pause()
    assert game.paused
    game.resume()
    assert not game.paused

def test_run_until_quit(game):
    pygame.event.get.return_value = []

    class Quitter:
        def draw(self, surface):
            game.quit()

    game.add_drawable(Quitter())
    game.run()

    assert not game.running
    pygame.quit.assert_called_once()
