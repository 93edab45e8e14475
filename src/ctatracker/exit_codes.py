"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ctatracker.exceptions.CtaTrackerError` subclass.
Shell wrappers can inspect the exit code to tell an offline miss apart from
a network failure without parsing stderr.

Example::

    $ ctatracker --mode offline predictions --route 20 --stop 456
    $ echo $?
    4   # EXIT_REPLAY_NOT_FOUND -- nothing saved for this route/stop
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_REPLAY_NOT_FOUND = 4
"""Offline mode found no saved response for the requested route/stop."""

EXIT_REQUEST_FAILED = 6
"""The live request failed (bad URL, DNS failure, connection refused, timeout, non-2xx)."""
