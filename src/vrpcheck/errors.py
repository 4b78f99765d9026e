# src/vrpcheck/errors.py
from __future__ import annotations

from datetime import datetime, timezone


class VrpCheckError(Exception):
    """Base class for all structured vrpcheck exceptions."""

    code: str | None = None

    def __init__(
        self, message: str, source: str | None = None, suggested_action: str | None = None
    ):
        super().__init__(message)
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_type = self.__class__.__name__
        self.source = source or "unknown"
        self.suggested_action = suggested_action

    def __str__(self) -> str:
        base = f"[{self.error_type}] {self.args[0]}"
        if self.code:
            base = f"{self.code} {base}"
        if self.source:
            base += f" (source={self.source})"
        if self.suggested_action:
            base += f" | action: {self.suggested_action}"
        return base


class DataError(VrpCheckError):
    """Problem document cannot be read or deserialized"""

    code = "E0000"


class MatrixError(VrpCheckError):
    """Routing matrix document cannot be read or deserialized"""

    code = "E0001"


class TransportCostError(VrpCheckError):
    """Routing matrices do not fit the problem"""

    code = "E0002"


class ConfigError(VrpCheckError):
    """Invalid or missing solver configuration"""

    code = "E0004"


class ValidationError(VrpCheckError):
    """Validation report could not be produced or persisted"""
