"""
Dialogue window - plays a DialogueSequence one paragraph at a time.

The window is a small state machine:

    UNINITIALIZED --initialize()--> ACTIVE --close()--> CLOSED

While ACTIVE it points at one paragraph, owns that paragraph's
advancement strategy and at most one PrintTask. The window listens to
its strategy: a fast-forward signal completes printing at once, an
advance signal moves the cursor. Moving past the last paragraph closes
the window with exhausted=True.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from functools import partial
from typing import TYPE_CHECKING, Callable, Optional

from dialogue.errors import ConfigurationError, DialogueError, InvalidStateError
from dialogue.hooks import invoke_hooks
from dialogue.printing import PrintTask
from engine.core.events import DialogueEvent

if TYPE_CHECKING:
    from dialogue.paragraph import Paragraph, Speaker
    from dialogue.sequence import DialogueSequence
    from dialogue.services import DialogueServices
    from dialogue.strategies import AdvancementStrategy
    from engine.ui.panel import DialoguePanel

logger = logging.getLogger(__name__)


class WindowState(Enum):
    """Lifecycle state of a dialogue window."""
    UNINITIALIZED = auto()
    ACTIVE = auto()
    CLOSED = auto()


class DialogueWindow:
    """
    Shows a sequence of paragraphs in a single panel.

    Args:
        panel: Presentation surface for title, portrait and body
        services: Scheduler, input and event bus
        on_destroy: Called with the window once it has closed; the host
            uses it to tear the window down
    """

    def __init__(
        self,
        panel: DialoguePanel,
        services: DialogueServices,
        on_destroy: Optional[Callable[[DialogueWindow], None]] = None,
    ):
        self.panel = panel
        self.services = services
        self.on_destroy = on_destroy

        self.state = WindowState.UNINITIALIZED
        self.exhausted: Optional[bool] = None
        self.errors: list[DialogueError] = []

        self._sequence: Optional[DialogueSequence] = None
        self._index = -1
        self._paragraph: Optional[Paragraph] = None
        self._strategy: Optional[AdvancementStrategy] = None
        self._task: Optional[PrintTask] = None
        self._activations = 0

    # Properties

    @property
    def sequence(self) -> Optional[DialogueSequence]:
        return self._sequence

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_paragraph(self) -> Optional[Paragraph]:
        return self._paragraph

    @property
    def active_strategy(self) -> Optional[AdvancementStrategy]:
        return self._strategy

    @property
    def printing_task(self) -> Optional[PrintTask]:
        return self._task

    @property
    def is_active(self) -> bool:
        return self.state == WindowState.ACTIVE

    @property
    def is_closed(self) -> bool:
        return self.state == WindowState.CLOSED

    @property
    def is_printing(self) -> bool:
        """True while the current paragraph is still being revealed."""
        return self._task is not None and self._task.running

    @property
    def activation_count(self) -> int:
        """How many paragraphs have been shown so far."""
        return self._activations

    # Lifecycle

    def initialize(self, sequence: DialogueSequence) -> None:
        """
        Start playing sequence from its first paragraph.

        Raises:
            InvalidStateError: The window was already initialized
        """
        if self.state != WindowState.UNINITIALIZED:
            raise InvalidStateError(f"Window already initialized ({self.state.name})")

        self._sequence = sequence
        self.state = WindowState.ACTIVE
        self.panel.show()
        logger.info("Dialogue window opened for '%s'", sequence.name)

        invoke_hooks(sequence.on_open, hook_name="on_open", on_error=self.report)
        self._publish(DialogueEvent.WINDOW_OPENED, sequence=sequence)

        # An open callback may have closed the window already
        if self.state == WindowState.ACTIVE:
            self._set_cursor(0)

    def fast_forward(self) -> None:
        """
        Show the current paragraph in full and report it as printed.

        Raises:
            InvalidStateError: No paragraph is active
        """
        if self._paragraph is None or self._strategy is None:
            raise InvalidStateError("fast_forward() with no active paragraph")

        if self._task is not None:
            self._task.fast_forward()
        else:
            self.panel.set_body(self._paragraph.text)
            if self._strategy.notify_finish_printing():
                self._on_paragraph_finished(self._paragraph, self._index)

    def advance(self) -> None:
        """
        Move on to the next paragraph, closing the window after the last.

        Raises:
            InvalidStateError: No strategy is active
        """
        if self._strategy is None:
            raise InvalidStateError("advance() with no active paragraph strategy")
        self._set_cursor(self._index + 1)

    def close(self, exhausted: bool = False) -> None:
        """
        Close the window.

        Args:
            exhausted: True if every paragraph was shown, False for an
                early close requested from outside

        Raises:
            InvalidStateError: The window was never initialized
        """
        if self.state == WindowState.CLOSED:
            return
        if self.state == WindowState.UNINITIALIZED:
            raise InvalidStateError("close() on a window that was never initialized")

        self._unbind_current()
        self._paragraph = None
        self.state = WindowState.CLOSED
        self.exhausted = exhausted
        logger.info(
            "Dialogue window closed for '%s' (exhausted=%s)", self._sequence.name, exhausted
        )

        try:
            invoke_hooks(
                self._sequence.on_close, exhausted, hook_name="on_close", on_error=self.report
            )
            self._publish(
                DialogueEvent.WINDOW_CLOSED, sequence=self._sequence, exhausted=exhausted
            )
        finally:
            self.panel.hide()
            if self.on_destroy is not None:
                self.on_destroy(self)

    # Listener interface

    def on_fast_forward(self) -> None:
        self.fast_forward()

    def on_advance(self) -> None:
        self.advance()

    # Reporting

    def report(self, error: DialogueError) -> None:
        """Surface a non-fatal problem without interrupting playback."""
        self.errors.append(error)
        logger.error("Dialogue '%s': %s", self._sequence.name if self._sequence else "?", error)
        if isinstance(error, ConfigurationError):
            self._publish(DialogueEvent.CONFIGURATION_ERROR, window=self, error=error)
        else:
            self._publish(DialogueEvent.CALLBACK_ERROR, window=self, error=error)

    # Internals

    def _set_cursor(self, index: int) -> None:
        """Unbind the current paragraph, then show the one at index."""
        self._unbind_current()

        self._index = index
        paragraphs = self._sequence.paragraphs
        if index >= len(paragraphs):
            self._paragraph = None
            self.close(exhausted=True)
            return

        paragraph = paragraphs[index]
        self._paragraph = paragraph
        self._activations += 1
        logger.debug("Paragraph %d/%d: %r", index + 1, len(paragraphs), paragraph.text[:20])

        strategy = paragraph.create_strategy(self.services)
        strategy.bind(paragraph)
        strategy.add_listener(self)
        strategy.error_handler = self.report
        self._strategy = strategy
        if not strategy.load():
            self.report(ConfigurationError(
                f"Paragraph {index} ({paragraph.advance.kind}) cannot auto-advance: "
                "its trigger source is missing"
            ))

        self._start_printing(paragraph, strategy)

    def _unbind_current(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

        strategy = self._strategy
        if strategy is None:
            return
        self._strategy = None
        if strategy.loaded:
            strategy.unload()
        strategy.remove_listener(self)
        strategy.error_handler = None
        strategy.detach()

    def _start_printing(self, paragraph: Paragraph, strategy: AdvancementStrategy) -> None:
        self._show_speaker(paragraph.speaker)
        self._publish(DialogueEvent.PARAGRAPH_STARTED, paragraph=paragraph, index=self._index)
        strategy.notify_start_printing()

        # A start callback may have moved the window on already
        if self._strategy is not strategy:
            return

        task = PrintTask(
            paragraph,
            strategy,
            self.panel.set_body,
            self.services.scheduler,
            on_finished=partial(self._on_paragraph_finished, paragraph, self._index),
            on_error=self._on_print_error,
        )
        self._task = task
        task.start()

    def _on_paragraph_finished(self, paragraph: Paragraph, index: int) -> None:
        self._publish(DialogueEvent.PARAGRAPH_FINISHED, paragraph=paragraph, index=index)

    def _on_print_error(self, error: ConfigurationError) -> None:
        self.report(error)
        # Still let the paragraph be read and advanced
        if self._strategy is not None:
            self.fast_forward()

    def _show_speaker(self, speaker: Optional[Speaker]) -> None:
        if speaker is not None:
            self.panel.set_title(speaker.name, speaker.name_color)
            if speaker.portrait is not None:
                self.panel.set_portrait(speaker.portrait)
            else:
                self.panel.hide_portrait()
        else:
            self.panel.hide_title()
            self.panel.hide_portrait()

    def _publish(self, event_type: DialogueEvent, **data) -> None:
        if self.services.events is not None:
            self.services.events.publish(event_type, **data)

    def __repr__(self) -> str:
        name = self._sequence.name if self._sequence else None
        return f"DialogueWindow(sequence={name!r}, state={self.state.name}, index={self._index})"
