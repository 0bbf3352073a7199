"""Config schema and accessor."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from event_listener.core.constants import DEFAULT_MAX_LISTENERS
from event_listener.core.errors import EventListenerConfigurationError

# Env keys that override config (loaded once per reload)
_ENV_MAX_LISTENERS = "EVENT_LISTENER_MAX_LISTENERS"
_ENV_STRICT = "EVENT_LISTENER_STRICT"
_ENV_FAIL_FAST = "EVENT_LISTENER_FAIL_FAST"
_ENV_OVERRIDE_KEYS = (_ENV_MAX_LISTENERS, _ENV_STRICT, _ENV_FAIL_FAST)


def _load_env_overrides() -> dict[str, str]:
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_bool_env(val: str) -> bool | None:
    """Parse env string to bool; None if not a recognized bool."""
    v = val.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return None


class Config:
    """Config accessor with attribute-style access for nested keys.

    Recognized keys::

        max_listeners: 10          # 0 disables the cap
        strict_max_listeners: false
        fail_fast: false
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data and re-read env overrides."""
        self._data = data or {}
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug("Config reloaded: max_listeners={}", self.max_listeners)

    def _validate(self) -> None:
        """Raise EventListenerConfigurationError on bad values."""
        raw = self._raw_max_listeners()
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise EventListenerConfigurationError(
                "max_listeners must be an integer",
                code="invalid_max_listeners",
                details={"value": raw},
            )
        try:
            max_listeners = self.max_listeners
        except (TypeError, ValueError) as exc:
            raise EventListenerConfigurationError(
                "max_listeners must be an integer",
                code="invalid_max_listeners",
                details={"value": self._raw_max_listeners()},
                original_error=exc,
            ) from exc
        if max_listeners < 0:
            raise EventListenerConfigurationError(
                "max_listeners must be >= 0",
                code="invalid_max_listeners",
                details={"value": max_listeners},
            )
        for key in ("strict_max_listeners", "fail_fast"):
            val = self._data.get(key)
            if val is not None and not isinstance(val, bool):
                raise EventListenerConfigurationError(
                    f"{key} must be a boolean",
                    code=f"invalid_{key}",
                    details={"type": type(val).__name__},
                )

    @property
    def raw(self) -> dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def _raw_max_listeners(self) -> Any:
        env = self._env.get(_ENV_MAX_LISTENERS, "").strip()
        if env:
            return env
        return self._data.get("max_listeners", DEFAULT_MAX_LISTENERS)

    @property
    def max_listeners(self) -> int:
        """Per-event listener cap (env EVENT_LISTENER_MAX_LISTENERS wins)."""
        return int(self._raw_max_listeners())

    @property
    def strict_max_listeners(self) -> bool:
        """Reject registrations past the cap instead of warning."""
        env_val = _parse_bool_env(self._env.get(_ENV_STRICT, ""))
        if env_val is not None:
            return env_val
        return bool(self._data.get("strict_max_listeners", False))

    @property
    def fail_fast(self) -> bool:
        """Stop an emit pass at the first failing listener."""
        env_val = _parse_bool_env(self._env.get(_ENV_FAIL_FAST, ""))
        if env_val is not None:
            return env_val
        return bool(self._data.get("fail_fast", False))


# Global config instance (set by __main__)
cfg: Config = Config({})
