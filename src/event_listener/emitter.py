"""Listener registry: registration, capacity check, removal and dispatch."""

from __future__ import annotations

import inspect
import warnings
from threading import RLock
from typing import TYPE_CHECKING, Any

from loguru import logger

from event_listener.core.constants import DEFAULT_MAX_LISTENERS, NEW_LISTENER, REMOVE_LISTENER
from event_listener.core.errors import InvalidListenerError, ListenerError, MaxListenersExceeded
from event_listener.listener import Listener, ListenerCallback, ListenerKind

if TYPE_CHECKING:
    from event_listener.config import Config

__all__ = ["EventListener"]


class EventListener:
    """Maps event names to ordered listeners and invokes them on emit.

    All operations take one re-entrant lock, so listeners may call back into
    the registry (``on``, ``remove_listener``, ``emit``) while being
    dispatched. Each emit pass works on a snapshot taken when it starts:
    listeners added during the pass wait for the next emit.

    ``max_listeners`` is advisory unless ``strict`` is set: a registration
    past the cap is still inserted and a :class:`MaxListenersExceeded`
    warning is issued. ``0`` disables the check.

    A listener that raises is logged and skipped unless ``fail_fast`` is set,
    in which case the pass stops and :class:`ListenerError` is raised.
    """

    def __init__(
        self,
        max_listeners: int = DEFAULT_MAX_LISTENERS,
        *,
        strict: bool = False,
        fail_fast: bool = False,
    ) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = RLock()
        self._max_listeners = DEFAULT_MAX_LISTENERS
        self.set_max_listeners(max_listeners)
        self.strict = strict
        self.fail_fast = fail_fast

    @classmethod
    def from_config(cls, config: Config) -> EventListener:
        """Build a registry from loaded config."""
        return cls(
            config.max_listeners,
            strict=config.strict_max_listeners,
            fail_fast=config.fail_fast,
        )

    def __repr__(self) -> str:
        return (
            f"<EventListener events={len(self._listeners)} "
            f"max_listeners={self._max_listeners}>"
        )

    # -- capacity ---------------------------------------------------------

    def set_max_listeners(self, max_listeners: int) -> None:
        """Set the per-event cap checked by future registrations (0 = unlimited)."""
        if max_listeners < 0:
            raise ValueError(f"max_listeners must be >= 0, got {max_listeners}")
        with self._lock:
            self._max_listeners = int(max_listeners)

    def get_max_listeners(self) -> int:
        return self._max_listeners

    # -- registration -----------------------------------------------------

    def on(self, event_name: str, callback: ListenerCallback) -> Listener:
        """Register callback for event_name. Returns the handle for removal."""
        return self._add(event_name, callback, ListenerKind.ON)

    def once(self, event_name: str, callback: ListenerCallback) -> Listener:
        """Register callback to be invoked on the next emit of event_name only."""
        return self._add(event_name, callback, ListenerKind.ONCE)

    def _add(self, event_name: str, callback: ListenerCallback, kind: ListenerKind) -> Listener:
        if not isinstance(event_name, str) or not event_name:
            raise InvalidListenerError(
                "Event name must be a non-empty string",
                code="invalid_event_name",
                details={"event_name": event_name},
            )
        if not callable(callback):
            raise InvalidListenerError(
                f"Listener for '{event_name}' is not callable: {callback!r}",
                code="invalid_callback",
                details={"event_name": event_name},
            )

        entry = Listener(callback, kind)
        with self._lock:
            if self.strict and self._over_cap(event_name):
                raise MaxListenersExceeded(
                    event_name, self.listener_count(event_name) + 1, self._max_listeners
                )
            if self._listeners.get(NEW_LISTENER):
                self.emit(NEW_LISTENER, entry)
                # newListener handlers may have filled the last slot
                if self.strict and self._over_cap(event_name):
                    raise MaxListenersExceeded(
                        event_name, self.listener_count(event_name) + 1, self._max_listeners
                    )

            exceeded = self._over_cap(event_name)
            self._listeners.setdefault(event_name, []).append(entry)
            count = len(self._listeners[event_name])
            logger.debug("Registered {} for '{}' ({} total)", entry, event_name, count)

        if exceeded:
            logger.warning(
                "Possible listener leak: {} listeners for '{}' (max {})",
                count,
                event_name,
                self._max_listeners,
            )
            warnings.warn(
                MaxListenersExceeded(event_name, count, self._max_listeners),
                stacklevel=3,
            )
        return entry

    def _over_cap(self, event_name: str) -> bool:
        """True if one more listener for event_name would exceed the cap. Lock held."""
        count = len(self._listeners.get(event_name, ())) + 1
        return 0 < self._max_listeners < count

    # -- removal ----------------------------------------------------------

    def remove_listener(self, event_name: str, listener: Listener | ListenerCallback) -> bool:
        """Remove the first entry matching a handle or callback. False if none matched."""
        with self._lock:
            entries = self._listeners.get(event_name)
            if not entries:
                return False
            for index, entry in enumerate(entries):
                if entry.matches(listener):
                    del entries[index]
                    break
            else:
                return False
            logger.debug("Removed {} from '{}'", entry, event_name)
            self._announce_removal(entry)
        return True

    off = remove_listener

    def remove_all_listeners(self, event_name: str | None = None) -> bool:
        """Clear one event name, or every name when none is given.

        Returns False only when a given event name was never registered.
        Bulk clears do not fire ``removeListener``.
        """
        with self._lock:
            if event_name is None:
                self._listeners.clear()
                logger.debug("Removed all listeners")
                return True
            entries = self._listeners.get(event_name)
            if entries is None:
                return False
            entries.clear()
            logger.debug("Removed all listeners for '{}'", event_name)
        return True

    def _announce_removal(self, entry: Listener) -> None:
        if self._listeners.get(REMOVE_LISTENER):
            self.emit(REMOVE_LISTENER, entry)

    # -- introspection ----------------------------------------------------

    def event_names(self) -> list[str]:
        """Event names that currently have at least one listener."""
        with self._lock:
            return [name for name, entries in self._listeners.items() if entries]

    def listeners(self, event_name: str) -> list[Listener]:
        with self._lock:
            return list(self._listeners.get(event_name, ()))

    def listener_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._listeners.get(event_name, ()))

    # -- dispatch ---------------------------------------------------------

    def _take_snapshot(self, event_name: str) -> list[Listener]:
        """Copy the entries for one pass and retire the once-only ones. Lock held."""
        entries = self._listeners.get(event_name)
        if not entries:
            return []
        snapshot = list(entries)
        retired = [entry for entry in snapshot if entry.once]
        if retired:
            entries[:] = [entry for entry in entries if not entry.once]
            for entry in retired:
                self._announce_removal(entry)
        return snapshot

    def _listener_failed(self, event_name: str, entry: Listener, exc: Exception) -> None:
        if self.fail_fast:
            raise ListenerError(event_name, entry, exc) from exc
        logger.exception("Listener {} failed for '{}': {}", entry, event_name, exc)

    def emit(self, event_name: str, payload: Any = None) -> int:
        """Invoke every listener for event_name in registration order.

        Returns the number of listeners invoked; 0 when nobody listens.
        """
        with self._lock:
            snapshot = self._take_snapshot(event_name)
            if not snapshot:
                logger.debug("Emitting '{}' with no listeners", event_name)
                return 0
            logger.debug("Emitting '{}' to {} listeners", event_name, len(snapshot))
            for entry in snapshot:
                try:
                    entry(event_name, payload)
                except Exception as exc:
                    self._listener_failed(event_name, entry, exc)
            return len(snapshot)

    async def emit_async(self, event_name: str, payload: Any = None) -> int:
        """Like emit, but awaits each listener's awaitable result before the next.

        The lock is held only while the snapshot is taken.
        """
        with self._lock:
            snapshot = self._take_snapshot(event_name)
        if not snapshot:
            logger.debug("Emitting '{}' with no listeners", event_name)
            return 0
        logger.debug("Emitting '{}' to {} listeners (async)", event_name, len(snapshot))
        for entry in snapshot:
            try:
                result = entry(event_name, payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._listener_failed(event_name, entry, exc)
        return len(snapshot)
