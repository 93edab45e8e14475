"""ctatracker -- fetch CTA Bus Tracker responses, live or from saved replays.

This package issues a single synchronous HTTP GET against the CTA Bus
Tracker web service and hands back the raw response body as text.  Responses
can optionally be saved to disk keyed by route and stop, and replayed later
when running offline.

Typical workflow::

    ctatracker --mode live-save predictions --route 20 --stop 456
    ctatracker --mode offline predictions --route 20 --stop 456

Modules:
    app: Typer application and CLI entry point.
    urlparams: Query-parameter extraction and predictions URL building.
    client: The web-call orchestrator and the session wrapper around it.
    replay: Deterministically named response files for offline replay.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
