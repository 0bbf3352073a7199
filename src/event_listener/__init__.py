"""In-process event listener registry."""

from event_listener.core.errors import (
    EventListenerConfigurationError,
    EventListenerError,
    InvalidListenerError,
    ListenerError,
    MaxListenersExceeded,
)
from event_listener.emitter import EventListener
from event_listener.listener import Listener, ListenerCallback, ListenerKind

__version__ = "0.2.0"

__all__ = [
    "EventListener",
    "EventListenerConfigurationError",
    "EventListenerError",
    "InvalidListenerError",
    "Listener",
    "ListenerCallback",
    "ListenerError",
    "ListenerKind",
    "MaxListenersExceeded",
    "__version__",
]
