"""Canonical Pydantic models shared across ctatracker modules.

Every other module imports its configuration shapes from here.  The models
are serialised as JSON in the user's config directory (see
:mod:`ctatracker.config`):

    :class:`CallMode`, :class:`RequestConfig`, :class:`ReplayConfig`,
    :class:`OutputConfig`, and :class:`GlobalConfig`.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


DEFAULT_BASE_URL = "http://ctabustracker.com/bustime/api/v2"


class CallMode(str, enum.Enum):
    """How :func:`~ctatracker.client.web.call_web_server` satisfies a request.

    The modes are mutually exclusive and chosen once per configuration,
    not per call.
    """

    LIVE = "live"
    LIVE_SAVE = "live-save"
    OFFLINE = "offline"


class RequestConfig(BaseModel):
    """HTTP request settings for the live transport."""

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")


class ReplayConfig(BaseModel):
    """Where saved responses are written and read back from."""

    directory: Optional[str] = Field(
        default=None,
        description="Directory holding .cta replay files (defaults to the working directory)",
    )


class OutputConfig(BaseModel):
    """Default output format, used when neither ``--json`` nor ``--plain`` is given."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """Top-level configuration stored in ``config.json``.

    Persisted by :func:`~ctatracker.config.save_global_config`.  Fields here
    have the lowest precedence and are overridden by the project file,
    environment variables, and CLI flags (see
    :func:`~ctatracker.config.resolve_config`).

    Example::

        GlobalConfig(
            mode=CallMode.LIVE_SAVE,
            api_key="89dj2he89d8j3j3ksjhdue93j",
            replay=ReplayConfig(directory="/var/lib/cta"),
        )
    """

    mode: CallMode = CallMode.LIVE
    api_key: Optional[str] = Field(
        default=None, description="CTA Bus Tracker API key"
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Bus Tracker API root URL"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    replay: ReplayConfig = Field(default_factory=ReplayConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
