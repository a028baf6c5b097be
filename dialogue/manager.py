"""
Dialogue manager - the host side of dialogue windows.

Creates a window for each sequence that is played, keeps track of the
windows that are open and forgets them once they close. Configuration
problems that prevent a sequence from starting (no panel, no
paragraphs) are logged and published instead of raised, and play()
returns None.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from dialogue.errors import ConfigurationError
from dialogue.window import DialogueWindow
from engine.core.events import DialogueEvent, UIEvent

if TYPE_CHECKING:
    from dialogue.loader import SequenceLoader
    from dialogue.sequence import DialogueSequence
    from dialogue.services import DialogueServices
    from engine.ui.panel import DialoguePanel

logger = logging.getLogger(__name__)


class DialogueManager:
    """
    Plays dialogue sequences and owns the resulting windows.

    Args:
        services: Scheduler, input and event bus shared by all windows
        panel_factory: Default panel builder for sequences without one
        on_panel_released: Called with a window's panel after it closed
            (e.g. to remove it from the game's drawables)
    """

    def __init__(
        self,
        services: DialogueServices,
        panel_factory: Optional[Callable[[], DialoguePanel]] = None,
        on_panel_released: Optional[Callable[[DialoguePanel], None]] = None,
    ):
        self.services = services
        self.panel_factory = panel_factory
        self.on_panel_released = on_panel_released
        self._windows: list[DialogueWindow] = []
        self.errors: list[ConfigurationError] = []

    @property
    def active_windows(self) -> list[DialogueWindow]:
        return list(self._windows)

    def is_active(self) -> bool:
        """Check if any dialogue window is open."""
        return bool(self._windows)

    def play(self, sequence: DialogueSequence) -> Optional[DialogueWindow]:
        """
        Open a window and play sequence in it.

        Returns:
            The window, or None if the sequence could not be started
        """
        factory = sequence.panel_factory or self.panel_factory
        if factory is None:
            self._report(ConfigurationError(
                f"Window panel unset for '{sequence.name}', cannot play dialogue."
            ))
            return None

        if sequence.is_empty:
            self._report(ConfigurationError(
                f"Sequence '{sequence.name}' has no paragraphs, cannot play dialogue."
            ))
            return None

        window = DialogueWindow(factory(), self.services, on_destroy=self._on_window_destroyed)
        self._windows.append(window)
        self._publish(UIEvent.DIALOG_STARTED, window=window, sequence=sequence)
        window.initialize(sequence)
        return window

    def play_file(self, loader: SequenceLoader, sequence_id: str) -> Optional[DialogueWindow]:
        """Load a sequence by id and play it."""
        try:
            sequence = loader.load(sequence_id)
        except ConfigurationError as error:
            self._report(error)
            return None
        return self.play(sequence)

    def close_all(self) -> None:
        """Force every open window closed (not exhausted)."""
        for window in list(self._windows):
            window.close(exhausted=False)

    def _on_window_destroyed(self, window: DialogueWindow) -> None:
        if window in self._windows:
            self._windows.remove(window)
        if self.on_panel_released is not None:
            self.on_panel_released(window.panel)
        self._publish(
            UIEvent.DIALOG_ENDED,
            window=window,
            sequence=window.sequence,
            exhausted=window.exhausted,
        )

    def _report(self, error: ConfigurationError) -> None:
        self.errors.append(error)
        logger.error("%s", error)
        self._publish(DialogueEvent.CONFIGURATION_ERROR, window=None, error=error)

    def _publish(self, event_type, **data) -> None:
        if self.services.events is not None:
            self.services.events.publish(event_type, **data)
