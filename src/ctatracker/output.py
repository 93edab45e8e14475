"""Where ctatracker writes things, and how they look.

Response bodies and ``replay list`` rows are data and go to stdout, so
``ctatracker fetch URL > saved.json`` captures exactly the body.  Everything
else (progress, the offline-miss lines from
:func:`~ctatracker.client.web.call_web_server`, save warnings, ``--verbose``
traces) goes to stderr.

Rich styling is used only when stdout is a terminal.  ``NO_COLOR``,
``TERM=dumb`` and ``--no-color`` all turn it off, and diagnostics then fall
back to bare ``print`` calls with a text prefix.

:func:`~ctatracker.app.main_callback` builds one :class:`OutputManager` per
invocation and installs it with :func:`set_output`; library code reaches it
through :func:`get_output` or the module-level shortcuts at the bottom.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is rendered.  ``AUTO`` picks RICH on a colour TTY, else PLAIN."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Renders response bodies and listings, and routes diagnostics to stderr.

    Args:
        format: Rendering for stdout data.
        no_color: Strip Rich styling everywhere.
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Emit ``debug`` messages.
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

        rich_stdout = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich_stdout)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- stdout ---

    def format_response(self, body: str) -> None:
        """Print a Bus Tracker response body.

        PLAIN prints it byte for byte.  JSON and RICH re-indent bodies that
        parse as JSON (the ``format=json`` API responses) and print anything
        else, such as the XML responses, unchanged.
        """
        if self._format == OutputFormat.PLAIN:
            self.print_data(body)
            return

        try:
            indented = json.dumps(json.loads(body), indent=2, ensure_ascii=False)
        except (json.JSONDecodeError, TypeError):
            self.print_data(body)
            return

        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(indented, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(indented)

    def print_data(self, text: str) -> None:
        """Print *text* to stdout, ending it with exactly one newline if it has none."""
        print(text, end="" if text.endswith("\n") else "\n", file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON list of objects, or TSV lines."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # --- stderr ---

    def _diag(self, prefix: str, style: str, message: str) -> None:
        # Rich markup in *message* is left alone so callers can style it.
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(f"[{style}]{escape(prefix)}[/{style}]{message}")
        else:
            self._stderr.print(f"{escape(prefix)}{message}")

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diag("", "", message)

    def success(self, message: str) -> None:
        if not self._quiet:
            if self._no_color:
                self._diag("", "", message)
            else:
                self._stderr.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diag("Warning: ", "yellow", message)

    def error(self, message: str) -> None:
        self._diag("Error: ", "bold red", message)

    def debug(self, message: str) -> None:
        """Only with ``--verbose``.  The message is markup-escaped."""
        if not self._verbose:
            return
        if self._no_color:
            self._diag("[debug] ", "", message)
        else:
            self._stderr.print(f"[dim]{escape('[debug]')} {escape(message)}[/dim]")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an AUTO one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager.  Tests call this between cases."""
    global _output
    _output = None


# Shortcuts for command modules.


def format_response(body: str) -> None:
    get_output().format_response(body)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def debug(message: str) -> None:
    get_output().debug(message)
