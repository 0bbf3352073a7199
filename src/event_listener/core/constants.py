"""Registry constants."""

from __future__ import annotations

from typing import Any, Final

DEFAULT_MAX_LISTENERS: Final = 10

# Values the CLI loads config files over
DEFAULT_SETTINGS: Final[dict[str, Any]] = {
    "max_listeners": DEFAULT_MAX_LISTENERS,
    "strict_max_listeners": False,
    "fail_fast": False,
}

# Meta events fired by the registry itself
NEW_LISTENER: Final = "newListener"
REMOVE_LISTENER: Final = "removeListener"
