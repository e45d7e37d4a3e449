"""
EventTarget Events: Errors
============================
Error types for the listener registry and dispatch engine.

Misuse is reported synchronously. Listener failures are never raised
through dispatch; they travel the error channel instead.
"""

from typing import Any


class EventTargetError(Exception):
    """Base error for EventTarget operations."""
    pass


class ArgumentError(EventTargetError, TypeError):
    """Malformed call: bad tag, listener, event, or error payload."""
    pass


class UnhandledFailure(EventTargetError):
    """
    Carrier for a non-exception failure value that reached no error listener.

    Exceptions surface as themselves. Any other value cannot be raised,
    so it is surfaced inside this wrapper with the original kept on
    `error`.
    """

    def __init__(self, error: Any):
        self.error = error
        super().__init__(f"Unhandled error event: {error!r}")
