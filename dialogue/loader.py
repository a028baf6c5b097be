"""
Sequence loader - builds DialogueSequences from JSON data files.

File format (`<data_path>/<sequence_id>.json`):

    {
        "name": "intro",
        "speakers": {
            "ana": {"name": "Ana", "color": [255, 200, 80], "portrait": "ana.png"}
        },
        "paragraphs": [
            {"text": "Hello!", "speaker": "ana", "print_rate": 20,
             "advance": {"kind": "input", "key": "z"}},
            {"text": "Follow me.", "print_rate": "$text_speed",
             "advance": {"kind": "timer", "duration": 1.5}},
            {"text": "...", "advance": {"kind": "event", "trigger": "door_opened"}}
        ]
    }

`"$name"` print rates and durations bind to a shared FloatVariable from
the loader's variable registry; triggers are looked up by name in its
trigger registry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import jsonschema
import pygame
from pydantic import ValidationError

from dialogue.config import DialogueConfig
from dialogue.errors import ConfigurationError
from dialogue.paragraph import (
    EventAdvance,
    InputAdvance,
    Paragraph,
    Speaker,
    TimerAdvance,
)
from dialogue.sequence import DialogueSequence
from dialogue.values import FloatReference, FloatVariable
from engine.core.events import GameEvent

logger = logging.getLogger(__name__)

_NUMBER_OR_VARIABLE = {
    "oneOf": [
        {"type": "number"},
        {"type": "string", "pattern": r"^\$\w+$"},
    ]
}

SEQUENCE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["paragraphs"],
    "properties": {
        "name": {"type": "string"},
        "speakers": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string"},
                    "color": {
                        "type": "array",
                        "items": {"type": "integer", "minimum": 0, "maximum": 255},
                        "minItems": 3,
                        "maxItems": 3,
                    },
                    "portrait": {"type": "string"},
                },
                "additionalProperties": False,
            },
        },
        "paragraphs": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["text"],
                "properties": {
                    "text": {"type": "string", "maxLength": 140},
                    "speaker": {"type": "string"},
                    "print_rate": _NUMBER_OR_VARIABLE,
                    "advance": {
                        "type": "object",
                        "required": ["kind"],
                        "properties": {
                            "kind": {"enum": ["event", "input", "timer"]},
                            "trigger": {"type": "string"},
                            "key": {"type": ["string", "integer"]},
                            "duration": _NUMBER_OR_VARIABLE,
                        },
                        "additionalProperties": False,
                    },
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}


def resolve_key(key: str | int) -> int:
    """
    Turn a key name ("z", "return", "SPACE") or code into a pygame key code.

    Raises:
        ConfigurationError: Unknown key name
    """
    if isinstance(key, int):
        return key

    for name in (f"K_{key}", f"K_{key.lower()}", f"K_{key.upper()}"):
        code = getattr(pygame, name, None)
        if isinstance(code, int):
            return code

    raise ConfigurationError(f"Unknown key name: {key!r}")


class SequenceLoader:
    """
    Loads and caches dialogue sequences from JSON files.

    Args:
        config: Data path and defaults for omitted fields
        triggers: GameEvents available to event-triggered paragraphs
        variables: Shared FloatVariables available as "$name" values
    """

    def __init__(
        self,
        config: Optional[DialogueConfig] = None,
        triggers: Optional[Mapping[str, GameEvent]] = None,
        variables: Optional[Mapping[str, FloatVariable]] = None,
    ):
        self.config = config or DialogueConfig()
        self.data_path = Path(self.config.data_path)
        self.triggers: dict[str, GameEvent] = dict(triggers or {})
        self.variables: dict[str, FloatVariable] = dict(variables or {})
        self._cache: dict[str, DialogueSequence] = {}

    def register_trigger(self, trigger: GameEvent) -> None:
        self.triggers[trigger.name] = trigger

    def register_variable(self, variable: FloatVariable) -> None:
        self.variables[variable.name] = variable

    def load(self, sequence_id: str) -> DialogueSequence:
        """
        Load a sequence by id (file name without extension).

        Raises:
            ConfigurationError: Missing file, invalid JSON or invalid data
        """
        if sequence_id in self._cache:
            return self._cache[sequence_id]

        path = self.data_path / f"{sequence_id}.json"
        if not path.exists():
            raise ConfigurationError(f"Dialogue sequence not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Dialogue file {path} must contain an object")
        data.setdefault("name", sequence_id)
        sequence = self.parse(data)
        self._cache[sequence_id] = sequence
        logger.info("Loaded dialogue '%s' (%d paragraphs)", sequence.name, len(sequence.paragraphs))
        return sequence

    def parse(self, data: dict[str, Any]) -> DialogueSequence:
        """
        Build a sequence from already-decoded data.

        Raises:
            ConfigurationError: Data does not match the sequence schema
        """
        try:
            jsonschema.validate(instance=data, schema=SEQUENCE_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Invalid dialogue data: {e.message}") from e

        speakers = {
            speaker_id: Speaker(
                name=entry["name"],
                name_color=tuple(entry.get("color", (255, 255, 255))),
                portrait=entry.get("portrait"),
            )
            for speaker_id, entry in data.get("speakers", {}).items()
        }

        paragraphs = [
            self._parse_paragraph(i, entry, speakers)
            for i, entry in enumerate(data["paragraphs"])
        ]
        return DialogueSequence(name=data.get("name", "dialogue"), paragraphs=paragraphs)

    def clear_cache(self) -> None:
        self._cache.clear()

    def _parse_paragraph(
        self,
        index: int,
        entry: dict[str, Any],
        speakers: dict[str, Speaker],
    ) -> Paragraph:
        speaker = None
        speaker_id = entry.get("speaker")
        if speaker_id is not None:
            if speaker_id not in speakers:
                raise ConfigurationError(f"Paragraph {index}: unknown speaker '{speaker_id}'")
            speaker = speakers[speaker_id]

        print_rate = self._reference(entry.get("print_rate", self.config.default_print_rate))

        try:
            return Paragraph(
                text=entry["text"],
                print_rate=print_rate,
                speaker=speaker,
                advance=self._parse_advance(index, entry.get("advance", {"kind": "input"})),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Paragraph {index}: {e}") from e

    def _parse_advance(self, index: int, entry: dict[str, Any]):
        kind = entry["kind"]

        if kind == "event":
            name = entry.get("trigger")
            trigger = self.triggers.get(name) if name else None
            if trigger is None:
                # The window reports this again when the paragraph is shown
                logger.warning("Paragraph %d: unknown trigger %r", index, name)
            return EventAdvance(trigger=trigger)

        if kind == "timer":
            duration = self._reference(entry.get("duration", self.config.default_timer))
            return TimerAdvance(duration=duration)

        return InputAdvance(key=resolve_key(entry.get("key", self.config.default_advance_key)))

    def _reference(self, value: float | str) -> FloatReference:
        if isinstance(value, str):
            name = value[1:]
            if name not in self.variables:
                raise ConfigurationError(f"Unknown shared value: {value}")
            return FloatReference(variable=self.variables[name])
        return FloatReference(constant=float(value))
