"""Confirmation providers asked before anything is deleted."""

from typing import Callable, Optional

import click


class ConfirmationProvider:
    """Answers whether a batch of removals may proceed."""

    def confirm(self, count: int) -> bool:
        raise NotImplementedError


class AutoConfirmation(ConfirmationProvider):
    """Fixed answer for unattended runs."""

    def __init__(self, answer: bool = True):
        self.answer = answer

    def confirm(self, count: int) -> bool:
        return self.answer


class PromptConfirmation(ConfirmationProvider):
    """Asks on the terminal. Only ``y`` or ``Y`` counts as yes."""

    def __init__(self, prompt: Optional[Callable[..., str]] = None):
        """Initialize the provider.

        Args:
            prompt: Callable taking the question text and returning the reply.
                Defaults to click.prompt with an empty default.
        """
        self.prompt = prompt or self._click_prompt

    @staticmethod
    def _click_prompt(text: str) -> str:
        return click.prompt(text, default="", show_default=False)

    def confirm(self, count: int) -> bool:
        try:
            reply = self.prompt(f"Remove {count} item(s)? (y/N)")
        except click.exceptions.Abort:
            # EOF on stdin or Ctrl-C
            return False
        return (reply or "").strip() in ("y", "Y")
