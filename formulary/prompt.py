"""Interactive prompts.

The resolution engine asks questions through the ``PromptProvider``
protocol; ``ClickPrompt`` is the terminal implementation.  Every way the
user can bail out of a prompt (Ctrl-C, Ctrl-D, click's ``Abort``) surfaces
as ``PromptCancelledError`` so callers unwind before touching the
filesystem.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

import click

from formulary.exceptions import PromptCancelledError

Validator = Callable[[str], None]
"""Raises ``ValueError`` with a user-facing message when input is invalid."""


@runtime_checkable
class PromptProvider(Protocol):
    def choice(self, question: str, options: list[str]) -> str:
        """Ask the user to pick exactly one of ``options``."""
        ...

    def confirm(self, question: str, options: list[str]) -> bool:
        """Ask a yes/no question.  ``options`` is ``[negative, affirmative]``."""
        ...

    def text(self, question: str, validator: Validator | None = None, helper: str = "") -> str:
        """Ask for free text, re-asking until ``validator`` accepts it."""
        ...


@contextmanager
def _cancellable() -> Iterator[None]:
    try:
        yield
    except (click.Abort, EOFError, KeyboardInterrupt) as exc:
        raise PromptCancelledError from exc


class ClickPrompt:
    """Terminal prompts rendered with click.

    Choices are shown as a numbered menu; the answer may be the number or
    the option itself.
    """

    def choice(self, question: str, options: list[str]) -> str:
        if not options:
            msg = f"no options to choose from for: {question}"
            raise ValueError(msg)

        click.echo(question)
        for index, option in enumerate(options, start=1):
            click.echo(f"  {index}) {option}")

        def _parse(value: str) -> str:
            value = value.strip()
            if value.isdigit() and 1 <= int(value) <= len(options):
                return options[int(value) - 1]
            if value in options:
                return value
            msg = f"'{value}' is not one of the listed options"
            raise click.BadParameter(msg)

        with _cancellable():
            return click.prompt(">", value_proc=_parse, prompt_suffix=" ")

    def confirm(self, question: str, options: list[str]) -> bool:
        negative, affirmative = options
        with _cancellable():
            answer = click.prompt(
                question,
                type=click.Choice([negative, affirmative], case_sensitive=False),
                default=negative,
            )
        return answer.lower() == affirmative.lower()

    def text(self, question: str, validator: Validator | None = None, helper: str = "") -> str:
        if helper:
            click.echo(click.style(helper, dim=True))

        def _validate(value: str) -> str:
            value = value.strip()
            if validator is not None:
                try:
                    validator(value)
                except ValueError as exc:
                    raise click.BadParameter(str(exc)) from exc
            return value

        with _cancellable():
            return click.prompt(question, value_proc=_validate)


def required(label: str) -> Validator:
    """Validator rejecting empty input."""

    def _check(value: str) -> None:
        if not value.strip():
            msg = f"{label} must not be empty"
            raise ValueError(msg)

    return _check
