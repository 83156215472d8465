"""
Error taxonomy surfaced by the upload and fetch endpoints.

Malformed cell values are never errors: they coerce to documented defaults in
``marketing_dashboard.data.normalize``. Only request-level problems end up here.
"""
from __future__ import annotations


class DashboardError(Exception):
    """Base error rendered as ``{"error": message, "details": details}``."""

    status_code = 500

    def __init__(self, message: str, details: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}


class InputValidationError(DashboardError):
    """Missing file, unsupported extension, or too few rows."""

    status_code = 400


class NotFoundError(DashboardError):
    status_code = 404


class UnexpectedFailure(DashboardError):
    """Anything else raised while decoding or processing an upload."""

    status_code = 500
