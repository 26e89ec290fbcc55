"""Exception hierarchy surfaced to callers of the auditor.

Probe failures are *not* exceptions (see :mod:`site_auditor.probes.models`);
only input, configuration and upstream-service problems are raised.
"""

from __future__ import annotations

from typing import Any


class AuditorError(Exception):
    """Base class.  ``status_code`` is the HTTP status the API layer uses."""

    status_code = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidTargetError(AuditorError):
    """The audit URL is missing or does not parse as an http(s) URL."""

    status_code = 400


class MissingInputError(AuditorError):
    """An explanation was requested with neither audit data nor history."""

    status_code = 400


class ConfigurationError(AuditorError):
    """The explanation credential is absent or still the placeholder."""

    status_code = 500


class UpstreamError(AuditorError):
    """The text-generation endpoint failed or returned no usable candidate."""

    status_code = 502
