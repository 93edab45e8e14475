"""Fetch commands -- call the Bus Tracker service or replay a saved response.

``ctatracker fetch URL`` passes an arbitrary URL through the orchestrator.
``ctatracker predictions --route R --stop S`` builds the ``getpredictions``
URL from the configured API root and key first.

The body is written to stdout.  A failed call exits with
:data:`~ctatracker.exit_codes.EXIT_REPLAY_NOT_FOUND` in offline mode and
:data:`~ctatracker.exit_codes.EXIT_REQUEST_FAILED` otherwise.
"""

from __future__ import annotations

import typer

from ctatracker.client import TrackerSession
from ctatracker.commands import resolve_from_context
from ctatracker.exit_codes import EXIT_REPLAY_NOT_FOUND, EXIT_REQUEST_FAILED
from ctatracker.models import CallMode
from ctatracker.output import debug, error, format_response


def _emit(session: TrackerSession, ok: bool, body: str) -> None:
    """Print *body* or exit with the failure code for the session's mode."""
    if ok:
        format_response(body)
        return
    if session.mode is CallMode.OFFLINE:
        raise typer.Exit(code=EXIT_REPLAY_NOT_FOUND)
    error("Request failed. Re-run with --verbose for details.")
    raise typer.Exit(code=EXIT_REQUEST_FAILED)


def fetch_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Full request URL."),
) -> None:
    """Fetch a URL and print the raw response body.

    Example::

        ctatracker fetch "http://ctabustracker.com/bustime/api/v2/getpredictions?key=K&rt=20&stpid=456&format=json"
        ctatracker --mode offline fetch "...?key=K&rt=20&stpid=456&format=json"
    """
    config = resolve_from_context(ctx)
    debug(f"Mode: {config.mode.value}")
    with TrackerSession(config) as session:
        ok, body = session.call(url)
        _emit(session, ok, body)


def predictions_command(
    ctx: typer.Context,
    route: str = typer.Option(..., "--route", "-r", help="Route designator (rt)."),
    stop: str = typer.Option(..., "--stop", "-s", help="Stop id (stpid)."),
) -> None:
    """Fetch arrival predictions for one route and stop.

    Example::

        ctatracker predictions --route 20 --stop 456
    """
    config = resolve_from_context(ctx)
    debug(f"Mode: {config.mode.value}")
    with TrackerSession(config) as session:
        url = session.predictions_url(route, stop)
        debug(f"GET {url}")
        ok, body = session.call(url)
        _emit(session, ok, body)
