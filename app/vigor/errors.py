"""
Error taxonomy for the scoring and transform engines.

The engines raise; the service layer decides how each kind surfaces
(HTTP status, user message).  No engine invents a default value in place
of raising.
"""

from __future__ import annotations

from typing import Iterable


class VigorError(Exception):
    """Base class for every error raised by :mod:`app.vigor`."""


class InsufficientDataError(VigorError):
    """No metric category could be scored.

    ``missing`` lists the categories that were absent or lacked a usable
    baseline, so the caller can tell the user *why*.
    """

    def __init__(self, missing: Iterable[str] = ()):
        self.missing = sorted(str(m) for m in missing)
        detail = ", ".join(self.missing) if self.missing else "none"
        super().__init__(
            f"Not enough data to compute a recovery score (missing: {detail})"
        )


class InvalidInputError(VigorError, ValueError):
    """A payload or request is structurally invalid (e.g. end before start)."""


class ConfigurationError(VigorError, KeyError):
    """An unknown or unsupported configuration name (e.g. preset)."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""
