"""
Terminal interaction — prompts on stdout, answers from stdin.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

import click

from darling_installer.core.interaction import (
    Interaction,
    Style,
    parse_selection,
    user_confirmed,
)

_STYLES: dict[str, dict] = {
    "plain": {},
    "heading": {"fg": "green", "bold": True},
    "success": {"fg": "green", "bold": True},
    "warning": {"fg": "yellow", "bold": True},
    "error": {"fg": "red", "bold": True},
    "detail": {"fg": "cyan"},
}


class ClickInteraction(Interaction):
    """Interaction over the terminal using click's styled output."""

    def confirm(self, question: str) -> bool:
        click.echo(f"{question} (Y/n): ", nl=False)
        # EOF reads as "", which is a decline
        line = sys.stdin.readline()
        return user_confirmed(line)

    def choose(self, prompt: str, items: Sequence[str]) -> list[int]:
        click.echo(prompt)
        for number, item in enumerate(items, start=1):
            click.echo(f"  {number}) ", nl=False)
            click.secho(item, fg="cyan", bold=True)

        # Same line policy as confirm: EOF reads as "", which selects nothing
        while True:
            click.echo("Numbers of the modules to install, in order (blank for none): ", nl=False)
            line = sys.stdin.readline()
            try:
                return parse_selection(line, len(items))
            except ValueError as e:
                click.secho(f"Error: {e}", fg="red")

    def notify(self, message: str, style: Style = "plain") -> None:
        click.secho(message, **_STYLES.get(style, {}))
