"""Built-in CLI sub-commands for ctatracker.

* :mod:`~ctatracker.commands.fetch` -- ``fetch`` and ``predictions``, the
  commands that call the web service (or replay it).
* :mod:`~ctatracker.commands.replay` -- list, locate, and clear saved
  responses.
* :mod:`~ctatracker.commands.config` -- view and modify global settings.

Multi-command groups export a :class:`typer.Typer` sub-application; single
commands export a plain callback registered directly on the root app.
"""

from __future__ import annotations

import typer

from ctatracker.models import GlobalConfig


def resolve_from_context(ctx: typer.Context) -> GlobalConfig:
    """Resolve the effective config using the root callback's flags.

    Raises:
        ConfigError: If any configuration layer is invalid.
    """
    from ctatracker.config import resolve_config

    obj = ctx.obj or {}
    return resolve_config(
        cli_mode=obj.get("mode"),
        cli_replay_dir=obj.get("replay_dir"),
        cli_timeout=obj.get("timeout"),
    )
