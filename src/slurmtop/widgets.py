"""Custom widgets for the slurmtop dashboard."""

from typing import List

from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static


class StatusBar(Static):
    """Status bar widget displaying messages."""

    message = reactive("Ready")

    def watch_message(self, value: str) -> None:
        self.update(Text(value, style="bold"))


class JobBoard(Static):
    """Full-width board the rendered view lines are painted on."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.lines: List[Text] = []

    def show_lines(self, lines: List[Text]) -> None:
        """Replace the board content with ``lines``."""
        self.lines = list(lines)
        self.update(Text("\n").join(lines))
