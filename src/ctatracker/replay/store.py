"""File-based store of saved responses, one file per (route, stop) pair.

Files are named ``cta-response-route-<route>-stopid-<stopid>.cta`` and hold
the verbatim response text.  Saving and loading derive the name through the
same :meth:`ReplayStore.path_for`, so a response saved for a URL is always
found again for any URL carrying the same ``rt`` and ``stpid`` values.

Reading a file back re-terminates every line with ``\\n``.  A body that did
not end with a newline therefore gains one on replay; nothing else changes.

See Also:
    :func:`~ctatracker.urlparams.get_url_param` -- the extractor that
    supplies the route and stop values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ctatracker.config import _atomic_write
from ctatracker.exceptions import InvalidReplayKeyError, ReplayNotFoundError
from ctatracker.urlparams import get_url_param

FILENAME_TEMPLATE = "cta-response-route-{route}-stopid-{stop_id}.cta"

_FILENAME_RE = re.compile(r"^cta-response-route-(?P<route>.*)-stopid-(?P<stop_id>.*)\.cta$")
_FORBIDDEN = ("/", "\\", "..", "\x00")


@dataclass(frozen=True)
class ReplayEntry:
    """A saved response file found in the replay directory."""

    route: str
    stop_id: str
    path: Path
    size: int


class ReplayStore:
    """Directory of saved responses keyed by route and stop.

    Args:
        directory: Directory holding the ``.cta`` files.  It is created on
            the first save; reading from a missing directory simply finds
            nothing.

    Example::

        store = ReplayStore("/tmp/cta")
        store.save(url, body)
        replayed = store.load(url)
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        """The directory holding the replay files."""
        return self._directory

    @staticmethod
    def key_for(url: str) -> tuple[str, str]:
        """Return the ``(route, stop_id)`` pair extracted from *url*."""
        return get_url_param(url, "rt="), get_url_param(url, "stpid=")

    def path_for(self, url: str) -> Path:
        """Return the replay file path for *url*.

        Both :meth:`save` and :meth:`load` resolve their file through this
        method.  The result is always a direct child of :attr:`directory`.

        Raises:
            InvalidReplayKeyError: If the route or stop value contains a
                path separator, ``..``, or a NUL byte.
        """
        route, stop_id = self.key_for(url)
        for name, value in (("rt", route), ("stpid", stop_id)):
            if any(bad in value for bad in _FORBIDDEN):
                raise InvalidReplayKeyError(
                    f"{name}={value!r} cannot be used in a replay filename"
                )
        return self._directory / FILENAME_TEMPLATE.format(route=route, stop_id=stop_id)

    def load(self, url: str) -> str:
        """Read back the saved response for *url*.

        Each line of the file is appended to the result followed by ``\\n``.
        Bytes that are not valid UTF-8 are replaced with U+FFFD.

        Raises:
            ReplayNotFoundError: If the file for the URL's route/stop cannot
                be named or read.
        """
        route, stop_id = self.key_for(url)
        try:
            path = self.path_for(url)
            with path.open(encoding="utf-8", errors="replace", newline="") as f:
                text = f.read()
        except (InvalidReplayKeyError, OSError) as exc:
            raise ReplayNotFoundError(
                f"No saved response for rt={route},stpid={stop_id}: {exc}",
                route=route,
                stop_id=stop_id,
            ) from exc

        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return "".join(line + "\n" for line in lines)

    def save(self, url: str, body: str) -> Path:
        """Write *body* verbatim to the replay file for *url*.

        An existing file for the same route/stop is replaced atomically.
        Only :attr:`directory` itself is created; nothing is written
        outside it.

        Returns:
            The path written.

        Raises:
            InvalidReplayKeyError: If the URL's route or stop value cannot
                name a file.
            OSError: If the directory or file cannot be written.
        """
        path = self.path_for(url)
        _atomic_write(path, body)
        return path

    def list_entries(self) -> list[ReplayEntry]:
        """Return all replay files in the directory, sorted by filename."""
        if not self._directory.is_dir():
            return []
        entries = []
        for path in sorted(self._directory.glob("cta-response-route-*-stopid-*.cta")):
            match = _FILENAME_RE.match(path.name)
            if match is None or not path.is_file():
                continue
            entries.append(
                ReplayEntry(
                    route=match.group("route"),
                    stop_id=match.group("stop_id"),
                    path=path,
                    size=path.stat().st_size,
                )
            )
        return entries

    def clear(self) -> int:
        """Delete every replay file in the directory.

        Returns:
            The number of files removed.
        """
        entries = self.list_entries()
        for entry in entries:
            entry.path.unlink()
        return len(entries)
