"""Re-export from core.errors."""

from event_listener.core.errors import (
    EventListenerConfigurationError,
    EventListenerError,
    InvalidListenerError,
    ListenerError,
    MaxListenersExceeded,
)

__all__ = [
    "EventListenerConfigurationError",
    "EventListenerError",
    "InvalidListenerError",
    "ListenerError",
    "MaxListenersExceeded",
]
