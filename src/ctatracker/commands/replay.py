"""Replay commands -- inspect and manage saved responses.

Provides the ``ctatracker replay`` sub-command group operating on the
replay directory resolved from ``--replay-dir``, ``CTATRACKER_REPLAY_DIR``,
or the config files (the working directory by default).
"""

from __future__ import annotations

import typer

from ctatracker.commands import resolve_from_context
from ctatracker.config import get_replay_dir
from ctatracker.output import info, print_data, print_table, success
from ctatracker.replay import ReplayStore


replay_app = typer.Typer(no_args_is_help=True)


def _store(ctx: typer.Context) -> ReplayStore:
    return ReplayStore(get_replay_dir(resolve_from_context(ctx)))


@replay_app.command("list")
def replay_list(ctx: typer.Context) -> None:
    """List saved responses by route and stop.

    Example::

        ctatracker replay list
        ctatracker --json replay list
    """
    store = _store(ctx)
    entries = store.list_entries()
    if not entries:
        info(f"No saved responses in {store.directory}")
        return
    rows = [[e.route, e.stop_id, str(e.size), e.path.name] for e in entries]
    print_table(["route", "stop", "bytes", "file"], rows, title="Saved responses")


@replay_app.command("path")
def replay_path(
    ctx: typer.Context,
    url: str = typer.Argument(help="Request URL whose replay file to locate."),
) -> None:
    """Print the replay file a URL saves to and replays from."""
    print_data(str(_store(ctx).path_for(url)))


@replay_app.command("clear")
def replay_clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete every saved response in the replay directory."""
    store = _store(ctx)
    if not yes:
        confirmed = typer.confirm(f"Delete all saved responses in {store.directory}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()
    removed = store.clear()
    success(f"Removed {removed} saved response(s).")
