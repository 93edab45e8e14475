"""Config-driven session that owns a transport handle for the CLI.

:class:`TrackerSession` is the owning counterpart to
:func:`~ctatracker.client.web.call_web_server`: it creates an
:class:`httpx.Client` from a :class:`~ctatracker.models.GlobalConfig` on
enter, lends it to every call, and closes it on exit.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ctatracker.client.web import call_web_server
from ctatracker.config import get_replay_dir
from ctatracker.exceptions import InvalidUsageError
from ctatracker.models import CallMode, GlobalConfig
from ctatracker.replay import ReplayStore
from ctatracker.urlparams import build_predictions_url


class TrackerSession:
    """Reusable Bus Tracker session.

    Must be used as a context manager so that the underlying transport is
    opened and closed exactly once for any number of calls.

    Args:
        config: Effective configuration (mode, API key, timeout, replay
            directory).
        store: Optional replay store; defaults to one rooted at the
            configured replay directory.
        transport: Optional httpx transport, e.g. a mock in tests.

    Example::

        with TrackerSession(config) as session:
            ok, body = session.predictions("20", "456")
    """

    def __init__(
        self,
        config: GlobalConfig,
        store: Optional[ReplayStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._store = store or ReplayStore(get_replay_dir(config))
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def mode(self) -> CallMode:
        """The call mode every request in this session uses."""
        return self._config.mode

    @property
    def store(self) -> ReplayStore:
        """The replay store used for saving and offline reads."""
        return self._store

    def __enter__(self) -> TrackerSession:
        self._client = httpx.Client(
            timeout=self._config.request.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def call(self, url: str) -> tuple[bool, str]:
        """Fetch *url* using the session's mode and store."""
        assert self._client is not None, "Session not open -- use as context manager"
        return call_web_server(self._client, url, mode=self.mode, store=self._store)

    def predictions_url(self, route: str, stop_id: str) -> str:
        """Build the ``getpredictions`` URL for *route* and *stop_id*.

        Offline mode needs no API key, so a placeholder is used when none
        is configured; the replay filename only depends on route and stop.

        Raises:
            InvalidUsageError: If no API key is configured in a live mode.
        """
        api_key = self._config.api_key
        if not api_key:
            if self.mode is not CallMode.OFFLINE:
                raise InvalidUsageError(
                    "No API key configured. Set CTATRACKER_API_KEY or run "
                    "'ctatracker config set api_key <KEY>'."
                )
            api_key = "offline"
        return build_predictions_url(self._config.base_url, api_key, route, stop_id)

    def predictions(self, route: str, stop_id: str) -> tuple[bool, str]:
        """Fetch arrival predictions for one route and stop."""
        return self.call(self.predictions_url(route, stop_id))
