"""
Dialogue sequence - an ordered run of paragraphs played in one window.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from dialogue.paragraph import Paragraph
from engine.ui.panel import DialoguePanel

OpenCallback = Callable[[], Any]
CloseCallback = Callable[[bool], Any]
PanelFactory = Callable[[], DialoguePanel]


class DialogueSequence(BaseModel):
    """
    A linear dialogue made up of paragraphs.

    Attributes:
        name: Identifier used in logs and events
        paragraphs: Paragraphs in playback order
        on_open: Called once when a window starts playing the sequence
        on_close: Called with `exhausted` when that window closes
        panel_factory: Builds the panel the sequence is shown in; None
            falls back to the DialogueManager's default
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, extra='forbid')

    name: str = "dialogue"
    paragraphs: list[Paragraph] = Field(default_factory=list)
    on_open: list[OpenCallback] = Field(default_factory=list)
    on_close: list[CloseCallback] = Field(default_factory=list)
    panel_factory: Optional[PanelFactory] = None

    @property
    def is_empty(self) -> bool:
        return not self.paragraphs
