"""
Dialogue configuration.

Defaults applied to paragraphs that do not specify their own settings
(mostly relevant for data files loaded by SequenceLoader).
"""

from __future__ import annotations

from typing import Any

import pygame


class DialogueConfig:
    """Configuration for the dialogue system."""

    def __init__(
        self,
        default_print_rate: float = 30.0,
        default_advance_key: int = pygame.K_z,
        default_timer: float = 2.0,
        data_path: str = "game/data/dialogue",
    ):
        self.default_print_rate = default_print_rate
        self.default_advance_key = default_advance_key
        self.default_timer = default_timer
        self.data_path = data_path

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DialogueConfig:
        """Build a config from a dict, ignoring unknown keys."""
        known = ("default_print_rate", "default_advance_key", "default_timer", "data_path")
        return cls(**{key: data[key] for key in known if key in data})
