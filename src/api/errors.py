"""Errors raised at the upstream boundary."""

from typing import Optional


class InvalidRequestError(ValueError):
    """Request rejected before any upstream call (e.g. bad coordinates)."""


class UpstreamUnavailableError(RuntimeError):
    """The primary weather provider failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
