"""
Presentation surfaces for dialogue windows.

Quick Start:
    from engine.ui import PygamePanel

    panel = PygamePanel(rect=(20, 540, 1240, 160))
    game.add_drawable(panel)
"""

from engine.ui.panel import DialoguePanel, RecordingPanel, PygamePanel, Color

__all__ = [
    "DialoguePanel",
    "RecordingPanel",
    "PygamePanel",
    "Color",
]
