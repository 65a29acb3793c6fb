"""Voyage CMS - Error Taxonomy.

Every failure a handler can surface derives from ``CMSError`` and carries the
HTTP status it maps to. Handlers in ``app.api.errors`` do the translation.
"""

from typing import List, Optional


class CMSError(Exception):
    """Base error for the content backend."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        super().__init__(message)


class ValidationError(CMSError):
    """Bad or missing input, detected before any write."""

    status_code = 400

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        self.fields = list(fields or [])
        super().__init__(message)


class NotFoundError(CMSError):
    """Referenced record is absent."""

    status_code = 404


class AuthError(CMSError):
    """Missing, invalid or expired credential, or insufficient role."""

    status_code = 401


class StoreError(CMSError):
    """Asset store fault."""

    status_code = 502


class UploadError(StoreError):
    """Upload rejected at the boundary (400) or failed in the store (502)."""


class IntegrityError(CMSError):
    """A persisted record could not be deserialized."""

    status_code = 500
