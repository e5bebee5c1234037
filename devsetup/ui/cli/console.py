"""
Terminal console — prompts, banners and coloured notices via click.
"""

from __future__ import annotations

import logging

import click

from devsetup.core.errors import ConfirmationError

logger = logging.getLogger(__name__)

MAX_CONFIRM_ATTEMPTS = 3

_YES = {"y", "yes"}
_NO = {"n", "no"}


def render_banner(message: str) -> str:
    """Boxed banner::

        +-----------+
        |  message  |
        +-----------+
    """
    border = "-" * (len(message) + 4)
    return f"+{border}+\n|  {message}  |\n+{border}+"


class ClickConsole:
    """Interactive console used by the CLI."""

    def __init__(self, max_attempts: int = MAX_CONFIRM_ATTEMPTS):
        self.max_attempts = max_attempts

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question, re-asking on invalid input.

        Raises:
            ConfirmationError: After ``max_attempts`` invalid answers.
        """
        for _ in range(self.max_attempts):
            answer = click.prompt(
                f"{question} (y/n)", default="", show_default=False
            ).strip().lower()
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            click.secho("Invalid input. Please enter 'y' or 'n'.", fg="yellow")
        raise ConfirmationError(
            f"No valid answer to {question!r} after {self.max_attempts} attempts"
        )

    def choose(self, title: str, options: list[str]) -> str:
        click.echo(title)
        for line in options:
            click.echo(line)
        return click.prompt("Choice", default="", show_default=False)

    def banner(self, message: str) -> None:
        logger.info("== %s ==", message)
        click.echo()
        click.secho(render_banner(message), fg="blue", bold=True)

    def notice(self, message: str) -> None:
        click.secho(message, fg="green")

    def warn(self, message: str) -> None:
        click.secho(message, fg="yellow")
