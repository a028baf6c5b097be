import pytest
import pygame

from dialogue.errors import CallbackError, InvalidStateError
from dialogue.paragraph import Paragraph
from dialogue.strategies import (
    EventTriggeredStrategy,
    InputTriggeredStrategy,
    TimerTriggeredStrategy,
)
from dialogue.values import FloatReference, FloatVariable
from engine.core.events import GameEvent

class Listener:
    def __init__(self):
        self.calls = []

    def on_fast_forward(self):
        self.calls.append("fast_forward")

    def on_advance(self):
        self.calls.append("advance")

@pytest.fixture
def paragraph():
    return Paragraph(text="Hello")

@pytest.fixture
def listener():
    return Listener()

@pytest.fixture
def door():
    return GameEvent("door_opened")

def bound(strategy, paragraph, listener):
    strategy.bind(paragraph)
    strategy.add_listener(listener)
    return strategy

# Binding

def test_bind_same_paragraph_twice_is_noop(door, paragraph):
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    strategy.bind(paragraph)
    assert strategy.target_paragraph is paragraph

def test_bind_different_paragraph_raises(door, paragraph):
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    with pytest.raises(InvalidStateError):
        strategy.bind(Paragraph(text="Other"))

def test_detach_restores_defaults(door, paragraph):
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    strategy.load()
    strategy.notify_finish_printing()
    strategy.unload()

    strategy.detach()

    assert strategy.target_paragraph is None
    assert not strategy.has_finished_printing
    assert not strategy.advance_already_signaled
    strategy.bind(Paragraph(text="Other"))

def test_detach_while_loaded_raises(door, paragraph):
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    strategy.load()
    with pytest.raises(InvalidStateError):
        strategy.detach()

def test_load_requires_binding(door):
    with pytest.raises(InvalidStateError):
        EventTriggeredStrategy(door).load()

def test_double_load_raises(door, paragraph):
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    strategy.load()
    with pytest.raises(InvalidStateError):
        strategy.load()

def test_unload_without_load_raises(door, paragraph):
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    with pytest.raises(InvalidStateError):
        strategy.unload()

def test_notify_requires_binding(door):
    strategy = EventTriggeredStrategy(door)
    with pytest.raises(InvalidStateError):
        strategy.notify_start_printing()
    with pytest.raises(InvalidStateError):
        strategy.notify_finish_printing()

# Notifications and signals

def test_print_callbacks(door):
    calls = []
    paragraph = Paragraph(
        text="Hi",
        on_start_printing=[lambda: calls.append("start")],
        on_finish_printing=[lambda: calls.append("finish")],
    )
    strategy = EventTriggeredStrategy(door)
    strategy.bind(paragraph)
    strategy.load()

    strategy.notify_start_printing()
    assert strategy.notify_finish_printing()
    assert not strategy.notify_finish_printing()

    assert calls == ["start", "finish"]
    assert strategy.has_finished_printing

def test_broken_print_hooks_are_reported(door):
    calls = []
    errors = []

    def broken():
        raise RuntimeError("broken hook")

    paragraph = Paragraph(
        text="Hi",
        on_start_printing=[broken, lambda: calls.append("start")],
        on_finish_printing=[broken, lambda: calls.append("finish")],
    )
    strategy = EventTriggeredStrategy(door)
    strategy.error_handler = errors.append
    strategy.bind(paragraph)
    strategy.load()

    strategy.notify_start_printing()
    assert strategy.notify_finish_printing()

    assert calls == ["start", "finish"]
    assert strategy.has_finished_printing
    assert all(isinstance(e, CallbackError) for e in errors)
    assert [e.hook_name for e in errors] == ["on_start_printing", "on_finish_printing"]

def test_broken_finish_hook_still_schedules_timer(services, listener, run_for):
    def broken():
        raise RuntimeError("broken hook")

    paragraph = Paragraph(text="Hi", on_finish_printing=[broken])
    strategy = bound(
        TimerTriggeredStrategy(FloatReference(constant=0.1), services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()

    assert strategy.notify_finish_printing()
    assert strategy.timer_pending
    run_for(0.2)

    assert listener.calls == ["advance"]

def test_signal_advance_fires_once(door, paragraph, listener):
    strategy = bound(EventTriggeredStrategy(door), paragraph, listener)
    strategy.load()

    strategy.signal_advance()
    strategy.signal_advance()

    assert listener.calls == ["advance"]
    assert strategy.advance_already_signaled

def test_signal_fast_forward_repeats(door, paragraph, listener):
    strategy = bound(EventTriggeredStrategy(door), paragraph, listener)
    strategy.signal_fast_forward()
    strategy.signal_fast_forward()
    assert listener.calls == ["fast_forward", "fast_forward"]

def test_multiple_listeners(door, paragraph):
    first, second = Listener(), Listener()
    strategy = bound(EventTriggeredStrategy(door), paragraph, first)
    strategy.add_listener(second)

    strategy.signal_advance()

    assert first.calls == ["advance"]
    assert second.calls == ["advance"]

def test_removed_listener_is_not_called(door, paragraph, listener):
    strategy = bound(EventTriggeredStrategy(door), paragraph, listener)
    strategy.remove_listener(listener)
    strategy.remove_listener(listener)

    strategy.signal_advance()

    assert listener.calls == []
    assert strategy.listener_count == 0

def test_reload_resets_flags(door, paragraph, listener):
    strategy = bound(EventTriggeredStrategy(door), paragraph, listener)
    strategy.load()
    strategy.notify_finish_printing()
    strategy.signal_advance()
    strategy.unload()

    strategy.load()

    assert not strategy.has_finished_printing
    assert not strategy.advance_already_signaled

# Event triggered

def test_event_strategy_subscribes_while_loaded(door, paragraph, listener):
    strategy = bound(EventTriggeredStrategy(door), paragraph, listener)

    door.raise_event()
    assert listener.calls == []

    assert strategy.load()
    assert door.listener_count == 1
    door.raise_event()
    assert listener.calls == ["advance"]

    strategy.unload()
    assert door.listener_count == 0

def test_event_strategy_advances_before_printing_finished(door, paragraph, listener):
    strategy = bound(EventTriggeredStrategy(door), paragraph, listener)
    strategy.load()
    strategy.notify_start_printing()

    door.raise_event()

    assert listener.calls == ["advance"]

def test_event_strategy_without_trigger(paragraph, listener):
    strategy = bound(EventTriggeredStrategy(None), paragraph, listener)

    assert strategy.load() is False
    assert strategy.loaded
    strategy.unload()
    assert listener.calls == []

# Input triggered

def test_input_strategy_fast_forwards_then_advances(services, paragraph, listener):
    strategy = bound(
        InputTriggeredStrategy(pygame.K_z, services.input, services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()
    assert services.scheduler.has_tick_callback(strategy.poll)

    services.input.press(pygame.K_z)
    services.input.update()
    services.scheduler.tick(0.05)
    assert listener.calls == ["fast_forward"]

    # Held key is not a new press
    services.input.update()
    services.scheduler.tick(0.05)
    assert listener.calls == ["fast_forward"]

    strategy.notify_finish_printing()
    services.input.release(pygame.K_z)
    services.input.update()
    services.input.press(pygame.K_z)
    services.input.update()
    services.scheduler.tick(0.05)

    assert listener.calls == ["fast_forward", "advance"]

def test_input_strategy_ignores_other_keys(services, paragraph, listener, tap):
    strategy = bound(
        InputTriggeredStrategy(pygame.K_z, services.input, services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()

    tap(pygame.K_x)

    assert listener.calls == []

def test_input_strategy_stops_polling_on_unload(services, paragraph, listener, tap):
    strategy = bound(
        InputTriggeredStrategy(pygame.K_z, services.input, services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()
    strategy.unload()

    tap(pygame.K_z)

    assert listener.calls == []
    assert services.scheduler.tick_callback_count == 0

# Timer triggered

def test_timer_strategy_advances_after_duration(services, paragraph, listener, run_for):
    strategy = bound(
        TimerTriggeredStrategy(FloatReference(constant=0.5), services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()
    run_for(1.0)
    assert listener.calls == []

    strategy.notify_finish_printing()
    assert strategy.timer_pending
    run_for(0.4)
    assert listener.calls == []

    run_for(0.15)
    assert listener.calls == ["advance"]
    assert not strategy.timer_pending

def test_timer_strategy_schedules_once(services, paragraph, listener, run_for):
    strategy = bound(
        TimerTriggeredStrategy(FloatReference(constant=0.1), services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()
    strategy.notify_finish_printing()
    strategy.notify_finish_printing()

    assert services.scheduler.pending_call_count == 1
    run_for(0.5)
    assert listener.calls == ["advance"]

def test_timer_strategy_unload_cancels(services, paragraph, listener, run_for):
    strategy = bound(
        TimerTriggeredStrategy(FloatReference(constant=0.1), services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()
    strategy.notify_finish_printing()
    strategy.unload()

    run_for(0.5)

    assert listener.calls == []
    assert services.scheduler.pending_call_count == 0

def test_timer_strategy_reads_shared_duration(services, paragraph, listener, run_for):
    delay = FloatVariable(name="delay", value=1.0)
    strategy = bound(
        TimerTriggeredStrategy(FloatReference(variable=delay), services.scheduler),
        paragraph,
        listener,
    )
    strategy.load()
    delay.value = 0.1
    strategy.notify_finish_printing()

    run_for(0.2)

    assert listener.calls == ["advance"]
