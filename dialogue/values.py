"""
Shared float values.

A FloatVariable is a named, mutable value that several paragraphs can
point at (a global "text speed" option, for instance). A FloatReference
is what a paragraph actually stores: either a constant or a variable,
resolved every time .value is read so changes to the variable are
picked up immediately.

Usage:
    text_speed = FloatVariable(name="text_speed", value=30.0)
    Paragraph(text="...", print_rate=text_speed)   # follows the option
    Paragraph(text="...", print_rate=12.5)         # fixed rate
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class FloatVariable(BaseModel):
    """Named mutable float shared between configurations."""

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    name: str = ""
    value: float = 0.0


class FloatReference(BaseModel):
    """
    Either a constant or a FloatVariable.

    Accepts a plain number or a FloatVariable wherever a FloatReference
    is expected.
    """

    model_config = ConfigDict(extra='forbid')

    constant: float = 0.0
    variable: Optional[FloatVariable] = None

    @model_validator(mode='before')
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, bool):
            return data
        if isinstance(data, (int, float)):
            return {"constant": float(data)}
        if isinstance(data, FloatVariable):
            return {"variable": data}
        return data

    @property
    def value(self) -> float:
        if self.variable is not None:
            return self.variable.value
        return self.constant

    @property
    def is_constant(self) -> bool:
        return self.variable is None
