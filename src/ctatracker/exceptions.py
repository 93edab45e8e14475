"""Exception hierarchy for ctatracker.

All exceptions inherit from :class:`CtaTrackerError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ctatracker.exit_codes`.

These exceptions never escape :func:`~ctatracker.client.web.call_web_server`,
which collapses them into its boolean success flag.  They do reach the CLI
from the configuration layer, where :func:`ctatracker.app.main` catches
``CtaTrackerError`` and exits with the matching code.

Subclass hierarchy::

    CtaTrackerError (exit 1)
    +-- InvalidUsageError   (exit 2)
    |   +-- InvalidReplayKeyError
    +-- ReplayNotFoundError (exit 4)
    +-- RequestFailedError  (exit 6)
    +-- ConfigError         (exit 1)
"""

from ctatracker.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REPLAY_NOT_FOUND,
    EXIT_REQUEST_FAILED,
)


class CtaTrackerError(Exception):
    """Base exception for all ctatracker errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CtaTrackerError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class InvalidReplayKeyError(InvalidUsageError):
    """Raised when a URL's route or stop value cannot name a replay file.

    Values containing a path separator, ``..``, or a NUL byte would place
    the file outside the replay directory.
    """


class ReplayNotFoundError(CtaTrackerError):
    """Raised when no saved response exists for the requested route/stop.

    Args:
        message: Human-readable error description.
        route: The ``rt`` value extracted from the URL (``"-1"`` if absent).
        stop_id: The ``stpid`` value extracted from the URL (``"-1"`` if absent).
    """

    exit_code = EXIT_REPLAY_NOT_FOUND

    def __init__(self, message: str, route: str = "-1", stop_id: str = "-1"):
        super().__init__(message)
        self.route = route
        self.stop_id = stop_id


class RequestFailedError(CtaTrackerError):
    """Raised on any live-request failure: bad URL, network error, timeout, or non-2xx status."""

    exit_code = EXIT_REQUEST_FAILED


class ConfigError(CtaTrackerError):
    """Raised for configuration problems (invalid JSON, failed validation, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
