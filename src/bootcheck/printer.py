"""Report output for bootstrap runs.

The runner only needs two operations: write text without a newline (the
check label) and write a full line (the glyph, error and help text).
``ConsolePrinter`` renders them through a Rich Console, which styles output
in terminals and falls back to plain text when piped.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console

__all__ = ["Printer", "ConsolePrinter", "console"]

console = Console()


@runtime_checkable
class Printer(Protocol):
    """Destination for the check report."""

    def write(self, text: str) -> None:
        """Write text without a trailing newline."""
        ...

    def write_line(self, text: str = "", *, style: str | None = None) -> None:
        """Write text followed by a newline."""
        ...


class ConsolePrinter:
    """Printer backed by a Rich Console.

    Markup and highlighting are disabled: labels, command lines and help
    text are printed verbatim.

    Example:
        ```python
        printer = ConsolePrinter()
        printer.write("node:".ljust(15))
        printer.write_line("✓", style="green")
        ```
    """

    def __init__(self, target: Console | None = None, *, color: bool = True) -> None:
        """Initialize the ConsolePrinter.

        Args:
            target: Console to print to. Defaults to the shared stdout console.
            color: Apply styles. False prints every line unstyled.
        """
        self._console = target if target is not None else console
        self._color = color

    def write(self, text: str) -> None:
        self._console.print(
            text, end="", markup=False, highlight=False, soft_wrap=True
        )

    def write_line(self, text: str = "", *, style: str | None = None) -> None:
        self._console.print(
            text,
            style=style if self._color else None,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
