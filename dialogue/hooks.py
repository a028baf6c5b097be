"""
Guarded invocation of user-supplied hooks.

Hooks are plain callables attached to paragraphs and sequences. A hook
that raises is logged and reported, and the remaining hooks still run.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from dialogue.errors import CallbackError

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[CallbackError], None]


def invoke_hooks(
    hooks: Iterable[Callable[..., Any]],
    *args: Any,
    hook_name: str,
    on_error: Optional[ErrorHandler] = None,
) -> None:
    """
    Call every hook with args, isolating failures.

    Args:
        hooks: Callables to invoke (iterated over a snapshot)
        *args: Positional arguments passed to each hook
        hook_name: Used in log messages and CallbackError
        on_error: Receives a CallbackError for every hook that raised
    """
    for hook in list(hooks):
        try:
            hook(*args)
        except Exception as e:
            logger.exception("Error in %s callback %r", hook_name, hook)
            if on_error is not None:
                on_error(CallbackError(hook_name, e))
