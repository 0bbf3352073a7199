"""Listener entries and the callback interface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol


class ListenerCallback(Protocol):
    """Callable invoked with the event name and its payload."""

    def __call__(self, event_name: str, payload: Any) -> Any:
        ...


class ListenerKind(Enum):
    """How long a listener stays registered."""

    ON = "on"  # until removed
    ONCE = "once"  # until first dispatch


@dataclass(eq=False)
class Listener:
    """One registered callback. Doubles as the handle returned at registration.

    Entries compare by identity, so two registrations of the same callback
    are distinct handles.
    """

    callback: ListenerCallback
    kind: ListenerKind = ListenerKind.ON

    @property
    def once(self) -> bool:
        return self.kind is ListenerKind.ONCE

    def matches(self, target: object) -> bool:
        """True if target is this handle or a callback equal to ours."""
        if target is self:
            return True
        if isinstance(target, Listener):
            return False
        return self.callback is target or self.callback == target

    def __call__(self, event_name: str, payload: Any) -> Any:
        return self.callback(event_name, payload)

    def __repr__(self) -> str:
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"<Listener {self.kind.value} {name}>"
