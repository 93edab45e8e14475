"""Query-parameter extraction and predictions URL building.

:func:`get_url_param` pulls a raw parameter value out of a URL string.  It is
used only to name replay files, so it works on the literal text of the URL
rather than on a parsed query string: the value is whatever sits between the
first occurrence of the key label and the next ``&``.

A parameter in the last position (no trailing ``&``) is reported as
:data:`NOT_FOUND`.  :func:`build_predictions_url` always places ``rt`` and
``stpid`` ahead of ``format`` so that URLs it produces extract cleanly.
"""

from __future__ import annotations

from urllib.parse import quote

NOT_FOUND = "-1"
"""Sentinel returned by :func:`get_url_param` when the key cannot be extracted."""

_DELIMITER = "&"


def get_url_param(url: str, key: str) -> str:
    """Return the value following *key* in *url*, up to the next ``&``.

    Args:
        url: The full request URL.
        key: The key label including its ``=``, e.g. ``"rt="``.

    Returns:
        The substring strictly between the first occurrence of *key* and the
        next ``&``, or :data:`NOT_FOUND` if *key* is absent or nothing
        delimits its value.

    Example::

        >>> get_url_param("http://host/api?rt=20&stpid=456&format=json", "stpid=")
        '456'
        >>> get_url_param("http://host/api?rt=20", "rt=")
        '-1'
    """
    pos = url.find(key)
    if pos == -1:
        return NOT_FOUND

    end = url.find(_DELIMITER, pos)
    if end == -1:
        return NOT_FOUND

    return url[pos + len(key):end]


def build_predictions_url(
    base_url: str,
    api_key: str,
    route: str,
    stop_id: str,
    fmt: str = "json",
) -> str:
    """Build a ``getpredictions`` URL for one route and stop.

    Args:
        base_url: API root, e.g. ``http://ctabustracker.com/bustime/api/v2``.
        api_key: Bus Tracker API key.
        route: Route designator (``rt``).
        stop_id: Stop id (``stpid``).
        fmt: Response format requested from the service.

    Returns:
        ``<base_url>/getpredictions?key=...&rt=...&stpid=...&format=...``
    """
    parts = [
        ("key", api_key),
        ("rt", route),
        ("stpid", stop_id),
        ("format", fmt),
    ]
    query = _DELIMITER.join(f"{name}={quote(str(value), safe='')}" for name, value in parts)
    return f"{base_url.rstrip('/')}/getpredictions?{query}"
