"""Event listener exceptions."""

from __future__ import annotations


class EventListenerError(Exception):
    """Base for registry errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class MaxListenersExceeded(EventListenerError, RuntimeWarning):
    """More listeners registered for one event name than the cap allows.

    Issued as a warning by default; raised only by a strict registry.
    """

    def __init__(self, event_name: str, count: int, max_listeners: int) -> None:
        super().__init__(
            f"{count} listeners registered for '{event_name}' (max {max_listeners})",
            code="max_listeners_exceeded",
            details={"event_name": event_name, "count": count, "max_listeners": max_listeners},
        )
        self.event_name = event_name
        self.count = count
        self.max_listeners = max_listeners


class InvalidListenerError(EventListenerError, ValueError):
    """Bad event name or non-callable callback."""


class ListenerError(EventListenerError):
    """A listener raised while an event was being emitted (fail-fast mode)."""

    def __init__(self, event_name: str, listener: object, exc: BaseException) -> None:
        super().__init__(
            f"Listener {listener!r} failed for '{event_name}': {exc}",
            code="listener_failed",
            details={"event_name": event_name},
            original_error=exc,
        )
        self.event_name = event_name
        self.listener = listener


class EventListenerConfigurationError(EventListenerError):
    """Config validation or load failure."""
