"""
Paragraph advancement strategies.

A strategy decides when the paragraph it is bound to should be
fast-forwarded (text shown in full at once) and when the window should
move on to the next paragraph. Listeners - normally the owning
DialogueWindow - receive those decisions through on_fast_forward() and
on_advance().

Lifecycle per activation:
    strategy.bind(paragraph)
    strategy.add_listener(window)
    strategy.load()
    ... notify_start_printing() / notify_finish_printing() ...
    strategy.unload()
    strategy.remove_listener(window)
    strategy.detach()

Variants:
- EventTriggeredStrategy: advance when a GameEvent is raised
- InputTriggeredStrategy: first key press fast-forwards, next one advances
- TimerTriggeredStrategy: advance a delay after printing finished
"""

from __future__ import annotations

import logging
from abc import ABC
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from dialogue.errors import CallbackError, InvalidStateError
from dialogue.hooks import invoke_hooks
from engine.core.events import GameEvent

if TYPE_CHECKING:
    from dialogue.paragraph import Paragraph
    from dialogue.values import FloatReference
    from engine.core.scheduler import ScheduledCall, Scheduler
    from engine.input.handler import InputHandler

logger = logging.getLogger(__name__)


class AdvanceListener(Protocol):
    """Receives advancement decisions from a strategy."""

    def on_fast_forward(self) -> None: ...

    def on_advance(self) -> None: ...


class AdvancementStrategy(ABC):
    """
    Base class for all advancement strategies.

    Attributes:
        target_paragraph: The bound paragraph, None while unbound
        has_finished_printing: Set once the paragraph text is fully shown
        advance_already_signaled: Set once on_advance has been signaled
        error_handler: Receives a CallbackError when a paragraph hook raises
    """

    def __init__(self):
        self.target_paragraph: Optional[Paragraph] = None
        self.has_finished_printing = False
        self.advance_already_signaled = False
        self.error_handler: Optional[Callable[[CallbackError], None]] = None
        self._listeners: list[AdvanceListener] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # Binding

    def bind(self, paragraph: Paragraph) -> None:
        """
        Attach the strategy to a paragraph.

        Binding the same paragraph again is a no-op.

        Raises:
            InvalidStateError: Already bound to a different paragraph
        """
        if self.target_paragraph is paragraph:
            return
        if self.target_paragraph is not None:
            raise InvalidStateError(
                f"{type(self).__name__} is already bound to another paragraph"
            )
        self.target_paragraph = paragraph
        self._reset()

    def detach(self) -> None:
        """Return to the unbound default state."""
        if self._loaded:
            raise InvalidStateError(f"{type(self).__name__} must be unloaded before detaching")
        self.target_paragraph = None
        self._reset()

    def _reset(self) -> None:
        self.has_finished_printing = False
        self.advance_already_signaled = False

    def _require_bound(self, operation: str) -> Paragraph:
        if self.target_paragraph is None:
            raise InvalidStateError(f"{type(self).__name__}.{operation}() called before bind()")
        return self.target_paragraph

    # Loading

    def load(self) -> bool:
        """
        Called when the paragraph becomes the window's current paragraph.

        Returns:
            True if the strategy is fully operational, False if it could
            not hook into its trigger source (already logged).
        """
        self._require_bound("load")
        if self._loaded:
            raise InvalidStateError(f"{type(self).__name__} loaded twice without unload()")
        self._loaded = True
        self._reset()
        return True

    def unload(self) -> None:
        """Called when the paragraph stops being the current paragraph."""
        if not self._loaded:
            raise InvalidStateError(f"{type(self).__name__}.unload() without load()")
        self._loaded = False
        self._reset()

    # Listeners

    def add_listener(self, listener: AdvanceListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: AdvanceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # Printing notifications

    def notify_start_printing(self) -> None:
        """Called by the window when the paragraph starts printing."""
        paragraph = self._require_bound("notify_start_printing")
        invoke_hooks(
            paragraph.on_start_printing,
            hook_name="on_start_printing",
            on_error=self.error_handler,
        )

    def notify_finish_printing(self) -> bool:
        """
        Called by the window when the paragraph is fully printed.

        Only the first call per activation does anything.

        Returns:
            True if this call completed the paragraph
        """
        paragraph = self._require_bound("notify_finish_printing")
        if self.has_finished_printing:
            return False
        self.has_finished_printing = True
        invoke_hooks(
            paragraph.on_finish_printing,
            hook_name="on_finish_printing",
            on_error=self.error_handler,
        )
        return True

    # Signals

    def signal_fast_forward(self) -> None:
        """Ask listeners to show the full text. Safe to repeat."""
        for listener in list(self._listeners):
            listener.on_fast_forward()

    def signal_advance(self) -> None:
        """Ask listeners to move on, at most once per activation."""
        if self.advance_already_signaled:
            return
        # Set before dispatch: a listener may unload us and re-enter
        self.advance_already_signaled = True
        for listener in list(self._listeners):
            listener.on_advance()

    def __repr__(self) -> str:
        target = self.target_paragraph.text[:20] if self.target_paragraph else None
        return f"{type(self).__name__}(target={target!r}, loaded={self._loaded})"


class EventTriggeredStrategy(AdvancementStrategy):
    """Advances the paragraph each time its GameEvent trigger is raised."""

    def __init__(self, trigger: Optional[GameEvent]):
        super().__init__()
        self.trigger = trigger
        self._subscribed = False

    def load(self) -> bool:
        super().load()
        if self.trigger is None:
            logger.error("Trigger unset for an event-triggered paragraph, cannot subscribe.")
            return False
        self.trigger.register_listener(self.raise_trigger)
        self._subscribed = True
        return True

    def unload(self) -> None:
        if self._subscribed:
            self.trigger.unregister_listener(self.raise_trigger)
            self._subscribed = False
        super().unload()

    def raise_trigger(self) -> None:
        """GameEvent listener."""
        self.signal_advance()


class InputTriggeredStrategy(AdvancementStrategy):
    """
    Advances the paragraph on a key press.

    The first press while printing fast-forwards; a press after the text
    is complete advances. The branch depends only on whether printing
    has finished, not on how many presses were seen.
    """

    def __init__(self, key: int, input_handler: InputHandler, scheduler: Scheduler):
        super().__init__()
        self.key = key
        self.input = input_handler
        self.scheduler = scheduler

    def load(self) -> bool:
        super().load()
        self.scheduler.add_tick_callback(self.poll)
        return True

    def unload(self) -> None:
        self.scheduler.remove_tick_callback(self.poll)
        super().unload()

    def poll(self, dt: float) -> None:
        """Per-tick input check."""
        if not self.input.is_key_just_pressed(self.key):
            return
        if self.has_finished_printing:
            self.signal_advance()
        else:
            self.signal_fast_forward()


class TimerTriggeredStrategy(AdvancementStrategy):
    """Advances the paragraph a fixed delay after it has finished printing."""

    def __init__(self, duration: FloatReference, scheduler: Scheduler):
        super().__init__()
        self.duration = duration
        self.scheduler = scheduler
        self._pending: Optional[ScheduledCall] = None

    @property
    def timer_pending(self) -> bool:
        return self._pending is not None and self._pending.pending

    def notify_finish_printing(self) -> bool:
        completed = super().notify_finish_printing()
        # A finish callback may already have unloaded us
        if completed and self._loaded:
            self._pending = self.scheduler.call_later(self.duration.value, self._on_timer)
        return completed

    def unload(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        super().unload()

    def _on_timer(self) -> None:
        self._pending = None
        self.signal_advance()
