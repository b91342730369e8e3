"""Console output for slimsdk.

Two streams, two purposes:

* **stdout** carries data and nothing else. Only ``slimsdk scope`` writes
  here (a table, tab-separated text or JSON), so its output can be piped.
* **stderr** carries everything a person watches during a run: stage
  progress, status lines, warnings, errors, next-step hints and the tail of
  Kiota's or ``dotnet``'s output when one of them fails.

Rich styling is used when stdout is a terminal. ``NO_COLOR``, ``TERM=dumb``
and ``--no-color`` switch every stderr line to plain ``print`` calls.

:func:`~slimsdk.app.main_callback` builds one :class:`OutputManager` from the
global flags and installs it with :func:`set_output`. Library code calls the
module-level helpers (:func:`info`, :func:`warning`, ...) instead of passing
the manager around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is formatted.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Format for stdout data. ``AUTO`` is resolved once, here.
        no_color: Emit stderr lines without Rich markup.
        quiet: Drop informational stderr lines (warnings and errors stay).
        verbose: Show :meth:`debug` lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- stdout ---

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:  # noqa: ANN401
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows in the active format.

        JSON mode prints a list of objects keyed by header, plain mode one
        tab-separated line per row after a header line, Rich mode a styled
        table with *title*.
        """
        if self._format == OutputFormat.JSON:
            self.print_json([dict(zip(headers, row)) for row in rows])
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self._stdout.print(table)

    # --- stderr ---

    def _emit(self, plain: str, styled: Optional[str] = None) -> None:
        """Write one diagnostic line, styled unless colour is disabled."""
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled if styled is not None else plain, highlight=False)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Print a next-step hint, prefixed with an arrow."""
        if not self._quiet:
            hint = f"→ {message}"
            self._emit(hint, f"[dim]{hint}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    def progress(self, message: str) -> None:
        """Print a stage progress line, only when a person is watching a terminal."""
        if not self._quiet and _is_tty():
            self._emit(message, f"[dim]{message}[/dim]")

    def diagnostics(self, text: str, limit: int = 40) -> None:
        """Print the last *limit* lines of an external tool's raw output.

        Lines are indented under the preceding error and shown verbatim (any
        Rich markup in them is escaped). Never suppressed by ``--quiet``.
        """
        lines = text.rstrip().splitlines()
        if len(lines) > limit:
            omitted = len(lines) - limit
            lines = [f"... ({omitted} earlier lines omitted)", *lines[-limit:]]
        for line in lines:
            self._emit(f"  {line}", f"  {escape(line)}")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` disables colour."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Tests call this between cases."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)


def progress(message: str) -> None:
    get_output().progress(message)


def diagnostics(text: str, limit: int = 40) -> None:
    get_output().diagnostics(text, limit)
