"""Configuration: YAML + env overlay."""

from event_listener.config.loader import _deep_update, load_config, load_config_with_env
from event_listener.config.schema import Config, cfg

__all__ = ["Config", "_deep_update", "cfg", "load_config", "load_config_with_env"]
