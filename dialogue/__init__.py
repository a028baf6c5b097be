"""
Dialogue module - linear, skippable typewriter dialogue.

Provides:
- Paragraphs with event, input or timer advancement
- Sequences played in a single dialogue window
- Typewriter printing with fast-forward
- JSON sequence loading

Quick Start:
    services = DialogueServices.from_game(game)
    manager = DialogueManager(services, panel_factory=RecordingPanel)

    sequence = DialogueSequence(paragraphs=[
        Paragraph(text="Hi!", print_rate=10, advance=InputAdvance(key=pygame.K_z)),
        Paragraph(text="Bye.", advance=TimerAdvance(duration=1.0)),
    ])
    manager.play(sequence)
"""

from dialogue.errors import DialogueError, ConfigurationError, InvalidStateError, CallbackError
from dialogue.values import FloatVariable, FloatReference
from dialogue.strategies import (
    AdvanceListener,
    AdvancementStrategy,
    EventTriggeredStrategy,
    InputTriggeredStrategy,
    TimerTriggeredStrategy,
)
from dialogue.paragraph import (
    Paragraph,
    Speaker,
    EventAdvance,
    InputAdvance,
    TimerAdvance,
    AdvancePolicy,
)
from dialogue.sequence import DialogueSequence
from dialogue.printing import PrintTask
from dialogue.services import DialogueServices
from dialogue.window import DialogueWindow, WindowState
from dialogue.manager import DialogueManager
from dialogue.config import DialogueConfig
from dialogue.loader import SequenceLoader, resolve_key

__all__ = [
    # Errors
    "DialogueError",
    "ConfigurationError",
    "InvalidStateError",
    "CallbackError",
    # Values
    "FloatVariable",
    "FloatReference",
    # Strategies
    "AdvanceListener",
    "AdvancementStrategy",
    "EventTriggeredStrategy",
    "InputTriggeredStrategy",
    "TimerTriggeredStrategy",
    # Data
    "Paragraph",
    "Speaker",
    "EventAdvance",
    "InputAdvance",
    "TimerAdvance",
    "AdvancePolicy",
    "DialogueSequence",
    # Runtime
    "PrintTask",
    "DialogueServices",
    "DialogueWindow",
    "WindowState",
    "DialogueManager",
    # Loading
    "DialogueConfig",
    "SequenceLoader",
    "resolve_key",
]
