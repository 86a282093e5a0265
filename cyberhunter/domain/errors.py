"""Errors raised by use cases and mapped to HTTP statuses at the API edge.

Every error subclasses :class:`ValueError` so callers that only care about
"the request could not be honoured" can keep catching ``ValueError``.
"""


class NotFoundError(ValueError):
    """The referenced resource does not exist."""


class PermissionDeniedError(ValueError):
    """The actor is authenticated but not allowed to perform the action."""


class ConflictError(ValueError):
    """The action collides with the current state of the resource."""


__all__ = ["ConflictError", "NotFoundError", "PermissionDeniedError"]
