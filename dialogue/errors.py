"""
Dialogue error taxonomy.

- ConfigurationError: the data or the host setup is wrong (missing panel,
  missing trigger, empty sequence, bad print rate, bad data file). These
  are reported through the window/manager reporting channel and the
  affected feature degrades instead of halting playback.
- InvalidStateError: a programming-contract violation (rebinding a
  strategy, advancing with no active paragraph, initializing twice).
  Always raised.
- CallbackError: a user hook (on_open, on_close, on_start_printing,
  on_finish_printing) raised. Logged and reported; playback goes on.

Repeated completion notifications or fast-forwards are not errors.
"""


class DialogueError(Exception):
    """Base class for dialogue errors."""


class ConfigurationError(DialogueError, ValueError):
    """Dialogue data or host configuration is invalid."""


class InvalidStateError(DialogueError, RuntimeError):
    """An operation was called in a state that does not allow it."""


class CallbackError(DialogueError):
    """A user-supplied hook raised an exception."""

    def __init__(self, hook_name: str, original: Exception):
        super().__init__(f"{hook_name} callback failed: {original!r}")
        self.hook_name = hook_name
        self.original = original
