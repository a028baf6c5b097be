"""
Typewriter printing task.

Reveals a paragraph's text a character at a time. The task is driven by
scheduler ticks and alternates between two phases:

- step: add rate * dt to a fractional character budget and emit every
  whole character it covers (the very first step starts with a budget of
  one, so the first character appears immediately)
- wait: sleep 1 / rate seconds of ticked time

After the last character there is one more wait before the bound
strategy is told that printing has finished. A large tick can therefore
emit several characters at once followed by a single normal-length wait.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from dialogue.errors import ConfigurationError
from engine.core.scheduler import TIME_EPSILON

if TYPE_CHECKING:
    from dialogue.paragraph import Paragraph
    from dialogue.strategies import AdvancementStrategy
    from engine.core.scheduler import Scheduler

logger = logging.getLogger(__name__)

TextSink = Callable[[str], None]


class PrintTask:
    """
    Cancellable, tick-driven typewriter for one paragraph activation.

    Args:
        paragraph: Paragraph to print (its text must not change meanwhile)
        strategy: Strategy bound to the paragraph; told when printing ends
        sink: Receives the visible text every time it grows
        scheduler: Tick source
        on_finished: Called after the strategy accepted the completion
        on_error: Receives a ConfigurationError raised while printing;
            without it the error propagates to the caller of start()/tick()
    """

    def __init__(
        self,
        paragraph: Paragraph,
        strategy: AdvancementStrategy,
        sink: TextSink,
        scheduler: Scheduler,
        on_finished: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[ConfigurationError], None]] = None,
    ):
        self.paragraph = paragraph
        self.strategy = strategy
        self.sink = sink
        self.scheduler = scheduler
        self.on_finished = on_finished
        self.on_error = on_error

        self._visible = ""
        self._printed = 0
        self._budget = 0.0
        self._wait = 0.0
        self._running = False
        self._finished = False
        self._started = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def visible_text(self) -> str:
        return self._visible

    @property
    def printed_count(self) -> int:
        return self._printed

    def start(self) -> None:
        """
        Clear the sink and begin printing.

        Raises:
            ConfigurationError: The paragraph's print rate is not positive
        """
        if self._started:
            return
        self._started = True

        self._visible = ""
        self._printed = 0
        self._budget = 1.0
        self.sink(self._visible)

        self._running = True
        self.scheduler.add_tick_callback(self._on_tick)
        self._guarded_step(0.0)

    def cancel(self) -> None:
        """Stop immediately. Nothing is written to the sink afterwards."""
        self._running = False
        self.scheduler.remove_tick_callback(self._on_tick)

    def fast_forward(self) -> None:
        """Stop, show the whole text and report completion."""
        self.cancel()
        self._visible = self.paragraph.text
        self._printed = len(self._visible)
        self.sink(self._visible)
        self._finished = True
        self._notify_finished()

    def _rate(self) -> float:
        rate = self.paragraph.rate
        if rate <= 0:
            raise ConfigurationError(f"Print rate must be positive, got {rate}")
        return rate

    def _on_tick(self, dt: float) -> None:
        if not self._running:
            return

        if self._wait > 0:
            self._wait -= dt
            if self._wait > TIME_EPSILON:
                return
            self._wait = 0.0

        self._guarded_step(dt)

    def _guarded_step(self, dt: float) -> None:
        try:
            self._step(dt)
        except ConfigurationError as error:
            self.cancel()
            if self.on_error is None:
                raise
            self.on_error(error)

    def _step(self, dt: float) -> None:
        text = self.paragraph.text

        if self._printed >= len(text):
            self._finish()
            return

        rate = self._rate()
        self._budget += rate * dt

        emitted = False
        while self._budget >= 1.0 and self._printed < len(text):
            self._visible += text[self._printed]
            self._printed += 1
            self._budget -= 1.0
            emitted = True

        if emitted:
            self.sink(self._visible)

        self._wait = 1.0 / rate

    def _finish(self) -> None:
        self.cancel()
        self._finished = True
        logger.debug("Finished printing %r", self.paragraph.text[:20])
        self._notify_finished()

    def _notify_finished(self) -> None:
        if self.strategy.notify_finish_printing() and self.on_finished is not None:
            self.on_finished()
