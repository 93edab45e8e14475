"""Typer application and CLI entry point for ctatracker.

This module wires together the top-level Typer application and registers
the built-in commands (``fetch``, ``predictions``, ``replay``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~ctatracker.exceptions.CtaTrackerError` exits cleanly with its
``exit_code``; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`ctatracker.config`: Configuration resolution used by every command.
    :mod:`ctatracker.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer

from ctatracker import __version__
from ctatracker.commands.config import config_app
from ctatracker.commands.fetch import fetch_command, predictions_command
from ctatracker.commands.replay import replay_app
from ctatracker.exit_codes import EXIT_GENERIC_FAILURE
from ctatracker.models import CallMode

if TYPE_CHECKING:
    from ctatracker.output import OutputFormat


app = typer.Typer(
    name="ctatracker",
    help="Fetch CTA Bus Tracker responses, live or from saved replays.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("fetch")(fetch_command)
app.command("predictions")(predictions_command)
app.add_typer(replay_app, name="replay", help="Manage saved responses.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"ctatracker {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    mode: Optional[CallMode] = typer.Option(
        None, "--mode", "-m", help="Call mode: live, live-save, or offline."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Request timeout in seconds."
    ),
    replay_dir: Optional[str] = typer.Option(
        None, "--replay-dir", help="Directory for saved responses."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~ctatracker.output.OutputManager` from the
    output flags (falling back to ``output.format`` from config) and stores the config overrides in ``ctx.obj`` for
    :func:`~ctatracker.commands.resolve_from_context`.
    """
    from ctatracker.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["mode"] = mode.value if mode is not None else None
    ctx.obj["timeout"] = timeout
    ctx.obj["replay_dir"] = replay_dir
    ctx.obj["verbose"] = verbose


def _configured_format() -> OutputFormat:
    """Return the configured ``output.format``, or AUTO if the config is unreadable.

    Config errors are left for the sub-command to report, so ``config reset``
    still runs against a broken file.
    """
    from ctatracker.config import resolve_config
    from ctatracker.exceptions import ConfigError
    from ctatracker.output import OutputFormat

    try:
        return OutputFormat(resolve_config().output.format)
    except ConfigError:
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from ctatracker.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``ctatracker`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from ctatracker.exceptions import CtaTrackerError
        from ctatracker.output import error

        if isinstance(exc, CtaTrackerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
