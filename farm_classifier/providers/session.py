"""Process-wide Earth Engine session.

Authenticates once at worker startup and exposes an explicit lifecycle:

    NOT_READY ──initialize()──▶ READY
                      └───────▶ FAILED

Requests check ``ensure_ready()`` before touching the service; anything
other than ``READY`` fails fast with ``ServiceNotReadyError`` instead of
issuing calls against an unauthenticated client.

Credentials, in order of precedence:
    1. ``key_json``: service-account key JSON (``GEE_KEY``).
    2. ``key_file``: path to a service-account key file (``GEE_KEY_FILE``).
    3. Neither: the library's persistent user credentials
       (``earthengine authenticate``), for local development.
"""

from __future__ import annotations

import enum
import json
import logging
from pathlib import Path

import ee

from farm_classifier.core.exceptions import ServiceNotReadyError

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    """Lifecycle state of the Earth Engine session."""

    NOT_READY = "not_ready"
    READY = "ready"
    FAILED = "failed"


class EarthEngineSession:
    """Long-lived, read-only (after start-up) Earth Engine session handle."""

    def __init__(self) -> None:
        self._state = SessionState.NOT_READY
        self._failure = ""

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is SessionState.READY

    @property
    def failure(self) -> str:
        """Reason for the last failed initialisation (empty otherwise)."""
        return self._failure

    def initialize(
        self,
        *,
        key_json: str = "",
        key_file: str = "",
        project: str = "",
    ) -> SessionState:
        """Authenticate and initialise the ``ee`` library.

        A failure is logged and recorded as ``FAILED`` rather than raised,
        so the worker keeps serving health checks and rejects
        classification requests with ``ServiceNotReadyError``.

        Returns:
            The resulting session state.
        """
        if self._state is SessionState.READY:
            return self._state

        try:
            kwargs: dict[str, object] = {}
            credentials = _load_credentials(key_json=key_json, key_file=key_file)
            if credentials is not None:
                kwargs["credentials"] = credentials
            if project:
                kwargs["project"] = project
            ee.Initialize(**kwargs)
        except Exception as exc:
            self._state = SessionState.FAILED
            self._failure = str(exc)
            logger.exception("Earth Engine initialisation failed | project=%s", project or "-")
            return self._state

        self._state = SessionState.READY
        self._failure = ""
        logger.info("Earth Engine session ready | project=%s", project or "-")
        return self._state

    def ensure_ready(self) -> None:
        """Raise ``ServiceNotReadyError`` unless the session is ``READY``."""
        if self._state is not SessionState.READY:
            msg = f"Earth Engine session is {self._state.value}"
            if self._failure:
                msg = f"{msg}: {self._failure}"
            raise ServiceNotReadyError(msg)


def _load_credentials(*, key_json: str, key_file: str) -> ee.ServiceAccountCredentials | None:
    """Build service-account credentials from a key, or ``None`` for defaults.

    Raises:
        ValueError: If the key is not JSON or lacks ``client_email``.
        OSError: If ``key_file`` cannot be read.
    """
    if not key_json and key_file:
        key_json = Path(key_file).read_text(encoding="utf-8")
    if not key_json:
        return None

    key_data = json.loads(key_json)
    email = key_data.get("client_email", "") if isinstance(key_data, dict) else ""
    if not email:
        msg = "service-account key has no client_email"
        raise ValueError(msg)
    return ee.ServiceAccountCredentials(email, key_data=key_json)
