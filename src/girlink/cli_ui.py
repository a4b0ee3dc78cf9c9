"""
Rich console UI components for the girlink CLI.

Provides styled messages and the numbered-choice prompter used to resolve
version conflicts.
"""

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from girlink.core.conflicts import Question

console = Console()

# Style definitions
STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "subtitle": Style(color="bright_black"),
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
    "info": Style(color="cyan"),
}


def print_header(title: str, subtitle: str = "") -> None:
    """Print a styled header."""
    console.print()
    console.print(Text(title, style=STYLES["title"]))
    if subtitle:
        console.print(Text(subtitle, style=STYLES["subtitle"]))
    console.print()


def print_success(message: str) -> None:
    console.print(Text(f"✓ {message}", style=STYLES["success"]))


def print_error(message: str) -> None:
    console.print(Text(f"✗ {message}", style=STYLES["error"]))


def print_warning(message: str) -> None:
    console.print(Text(f"⚠ {message}", style=STYLES["warning"]))


class RichPrompter:
    """
    Numbered single-choice prompter.

    Accepts the number of a choice or its name (case-insensitive). ``q`` or
    end of input gives up and returns None.
    """

    def __init__(self, output: Console | None = None):
        self.console = output or console

    def notify(self, message: str) -> None:
        self.console.print()
        self.console.print(Text(message, style=STYLES["info"]))
        self.console.print()

    def ask(self, question: Question) -> str | None:
        self.console.print()
        self.console.print(Text(question.message, style=STYLES["title"]))

        table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        table.add_column("Num", style="cyan", width=4)
        table.add_column("Choice", style="white")
        for i, choice in enumerate(question.choices, 1):
            table.add_row(f"{i}.", choice)
        self.console.print(table)

        while True:
            try:
                answer = self.console.input(Text("Enter number or name: ", style=STYLES["info"]))
            except (KeyboardInterrupt, EOFError):
                self.console.print()
                return None

            answer = answer.strip()
            if not answer or answer.lower() in ("q", "quit", "cancel"):
                return None

            choice = self._match(answer, question.choices)
            if choice is not None:
                return choice

            self.console.print(
                Text(
                    f"Invalid choice. Enter 1-{len(question.choices)} or a choice name.",
                    style=STYLES["error"],
                )
            )

    @staticmethod
    def _match(answer: str, choices: tuple[str, ...]) -> str | None:
        if answer.isdigit():
            idx = int(answer) - 1
            if 0 <= idx < len(choices):
                return choices[idx]
            return None
        lowered = answer.lower()
        for choice in choices:
            if choice.lower() == lowered:
                return choice
        return None
