"""HTTP client module for ctatracker.

Functions and classes:
    :func:`call_web_server` -- the orchestrator; borrows a caller-owned
    :class:`httpx.Client` and returns ``(success, body)``.
    :class:`TrackerSession` -- context manager that owns the client and
    applies the configured mode and replay store to every call.

Example::

    import httpx
    from ctatracker.client import call_web_server

    with httpx.Client(timeout=10) as handle:
        ok, body = call_web_server(handle, url)
"""

from ctatracker.client.session import TrackerSession
from ctatracker.client.web import call_web_server

__all__ = ["TrackerSession", "call_web_server"]
