"""The web-call orchestrator: one synchronous GET, or its offline replay.

:func:`call_web_server` is the library's single entry point for fetching a
Bus Tracker response.  It borrows a caller-owned :class:`httpx.Client`
(the transport handle) and, depending on the :class:`~ctatracker.models.CallMode`:

- **live** -- performs the GET and returns the body.
- **live-save** -- performs the GET and also writes a successful body to the
  replay file for the URL's route/stop.
- **offline** -- skips the network entirely and reads the replay file.

Every failure collapses into ``(False, "")``.  Internally the steps raise
:class:`~ctatracker.exceptions.CtaTrackerError` subclasses; they are caught
here and reported through :mod:`ctatracker.output` instead of propagating.

No retries are attempted.  Concurrent calls sharing one client must be
serialized by the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import httpx

from ctatracker.exceptions import InvalidReplayKeyError, ReplayNotFoundError, RequestFailedError
from ctatracker.models import CallMode
from ctatracker.output import get_output
from ctatracker.replay import ReplayStore


def call_web_server(
    client: httpx.Client,
    url: str,
    *,
    mode: Union[CallMode, str] = CallMode.LIVE,
    store: Optional[ReplayStore] = None,
    timeout: Optional[float] = None,
) -> tuple[bool, str]:
    """Fetch *url* and return ``(success, body)``.

    Args:
        client: Transport handle owned by the caller.  It is never closed
            here, and nothing set up for one call is carried on it into the
            next: each call builds a fresh request and a fresh body buffer.
        url: Request URL.  In ``live-save`` and ``offline`` modes its ``rt``
            and ``stpid`` parameters name the replay file, and each needs a
            trailing ``&`` to be extracted.
        mode: Live, live-with-save, or offline replay.
        store: Replay file store.  Defaults to the current working directory.
        timeout: Per-call timeout in seconds.  ``None`` uses the client's
            own timeout.

    Returns:
        ``(True, body)`` on success.  ``(False, "")`` on an invalid handle or
        URL, any transport failure (DNS, refused connection, timeout), a
        non-2xx status, or a missing replay file.
    """
    mode = CallMode(mode)
    if store is None:
        store = ReplayStore(Path.cwd())

    if mode is CallMode.OFFLINE:
        return _call_offline(store, url)

    output = get_output()
    try:
        body = _fetch(client, url, timeout)
    except RequestFailedError as exc:
        output.debug(f"GET {url} failed: {exc}")
        return False, ""

    if mode is CallMode.LIVE_SAVE:
        try:
            path = store.save(url, body)
        except (InvalidReplayKeyError, OSError) as exc:
            output.warning(f"Could not save response for offline use: {exc}")
        else:
            output.debug(f"Saved response to {path}")

    return True, body


def _call_offline(store: ReplayStore, url: str) -> tuple[bool, str]:
    """Replay the saved response for *url*, emitting diagnostics on a miss."""
    output = get_output()
    try:
        body = store.load(url)
    except ReplayNotFoundError as exc:
        output.error("in call_web_server, we are running offline...")
        output.error(f"you called with rt={exc.route},stpid={exc.stop_id}")
        output.error("no data is available for this route/stop")
        output.debug(str(exc))
        return False, ""

    output.debug(f"Replayed {store.path_for(url)}")
    return True, body


def _fetch(client: httpx.Client, url: str, timeout: Optional[float]) -> str:
    """Perform the GET and accumulate the decoded body chunk by chunk.

    Raises:
        RequestFailedError: On any configuration, transport, or status failure.
    """
    if not isinstance(client, httpx.Client) or client.is_closed:
        raise RequestFailedError("transport handle is missing or closed")

    kwargs: dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout

    try:
        request = client.build_request("GET", url, **kwargs)
    except (httpx.InvalidURL, TypeError) as exc:
        raise RequestFailedError(f"invalid URL {url!r}: {exc}") from exc

    chunks: list[str] = []
    try:
        response = client.send(request, stream=True)
        try:
            response.raise_for_status()
            for chunk in response.iter_text():
                chunks.append(chunk)
        finally:
            response.close()
    except httpx.HTTPError as exc:
        raise RequestFailedError(str(exc) or type(exc).__name__) from exc

    return "".join(chunks)
