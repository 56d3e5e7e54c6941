"""
Interactive line input.

Components that ask the user something take a `prompt` callable with the
signature of `read_line`, so tests can script the answers.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], Optional[str]]


def read_line(prompt: str) -> Optional[str]:
    """
    Print prompt and read one line from standard input.

    Returns:
        The line without its trailing newline, or None at end of input
    """
    try:
        return input(f"{prompt} ")
    except EOFError:
        logger.debug("End of input while waiting for an answer")
        return None


def always_yes(prompt: str) -> Optional[str]:
    """Prompt replacement that answers 'y' without asking."""
    logger.debug(f"Assuming 'y' for: {prompt}")
    return "y"


__all__ = ["PromptFn", "read_line", "always_yes"]
