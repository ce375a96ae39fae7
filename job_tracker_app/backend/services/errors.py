"""
Error taxonomy for company mutations.

Every error carries a human-readable ``message`` that is safe to show to the
user; the underlying cause (if any) is chained via ``raise ... from``.
"""


class TrackerError(Exception):
    """Base class for all tracker errors."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """A field failed validation; nothing was written."""

    title = "Invalid input"


class AuthorizationError(TrackerError):
    """The scoped predicate matched no rows owned by the caller."""


class StoreError(TrackerError):
    """The database call itself failed."""


class RateLimitError(TrackerError):
    """The sliding-window limiter rejected the call before it was attempted."""

    title = "Too many requests"


class AuthenticationRequiredError(TrackerError):
    """No user is signed in."""

    title = "Sign-in required"
