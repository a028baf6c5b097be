import pytest
from types import SimpleNamespace
from engine.input.handler import InputHandler, InputEvent
import pygame

def test_initial_state():
    handler = InputHandler()
    assert not handler.is_key_pressed(pygame.K_z)
    assert not handler.is_key_just_pressed(pygame.K_z)
    assert handler.state.keys_pressed == set()

def test_just_pressed_lasts_one_update():
    handler = InputHandler()
    handler.press(pygame.K_z)

    handler.update()
    assert handler.is_key_pressed(pygame.K_z)
    assert handler.is_key_just_pressed(pygame.K_z)

    handler.update()
    assert handler.is_key_pressed(pygame.K_z)
    assert not handler.is_key_just_pressed(pygame.K_z)

def test_just_released():
    handler = InputHandler()
    handler.press(pygame.K_z)
    handler.update()

    handler.release(pygame.K_z)
    handler.update()

    assert not handler.is_key_pressed(pygame.K_z)
    assert handler.is_key_just_released(pygame.K_z)

def test_press_and_release_between_updates_is_lost():
    handler = InputHandler()
    handler.press(pygame.K_z)
    handler.release(pygame.K_z)
    handler.update()

    assert not handler.is_key_just_pressed(pygame.K_z)

def test_process_event():
    handler = InputHandler()
    handler.process_event(SimpleNamespace(type=pygame.KEYDOWN, key=pygame.K_SPACE))
    assert handler.is_key_pressed(pygame.K_SPACE)

    handler.process_event(SimpleNamespace(type=pygame.KEYUP, key=pygame.K_SPACE))
    assert not handler.is_key_pressed(pygame.K_SPACE)

def test_release_all():
    handler = InputHandler()
    handler.press(pygame.K_a)
    handler.press(pygame.K_b)
    handler.release_all()
    assert handler.state.keys_pressed == set()

def test_publishes_key_events(event_bus):
    handler = InputHandler(event_bus)
    pressed, released = [], []
    event_bus.subscribe(InputEvent.KEY_PRESSED, lambda e: pressed.append(e["key"]))
    event_bus.subscribe(InputEvent.KEY_RELEASED, lambda e: released.append(e["key"]))

    handler.press(pygame.K_z)
    handler.update()
    handler.release(pygame.K_z)
    handler.update()

    assert pressed == [pygame.K_z]
    assert released == [pygame.K_z]
