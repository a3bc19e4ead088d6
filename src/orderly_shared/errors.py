"""
Service-level exceptions raised alongside :class:`ValidationError`.
"""


class NotFoundError(Exception):
    """Raised when a referenced record no longer exists."""


class BackendError(Exception):
    """Raised when the backend store fails to complete a read or write."""
