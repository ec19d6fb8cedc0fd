"""Domain error types.

Each class subclasses the matching Werkzeug HTTP exception, so raising one
anywhere inside a request produces the standard JSON error body through
the app-wide error handler.
"""
from __future__ import annotations
from werkzeug.exceptions import BadRequest, Conflict, Forbidden, NotFound, Unauthorized


class ValidationError(BadRequest):
    """Malformed input or an illegal status transition."""


class AuthenticationError(Unauthorized):
    """Bad or missing credentials."""


class UnknownAccountError(AuthenticationError):
    """Login attempted for an email with no account."""


class PermissionDenied(Forbidden):
    """Authenticated caller lacks a required permission."""


class ResourceNotFound(NotFound):
    pass


class DuplicateResource(Conflict):
    pass


__all__ = [
    'ValidationError', 'AuthenticationError', 'UnknownAccountError',
    'PermissionDenied', 'ResourceNotFound', 'DuplicateResource',
]
