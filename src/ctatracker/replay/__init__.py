"""Saved responses for offline replay.

This package provides :class:`ReplayStore`, which names, writes, and reads
back plain-text response files keyed by the route (``rt``) and stop
(``stpid``) parameters of a request URL.

The store is consumed by :func:`~ctatracker.client.web.call_web_server` in
the ``live-save`` and ``offline`` modes and by the ``ctatracker replay`` CLI
commands.
"""

from ctatracker.replay.store import FILENAME_TEMPLATE, ReplayEntry, ReplayStore

__all__ = ["FILENAME_TEMPLATE", "ReplayEntry", "ReplayStore"]
