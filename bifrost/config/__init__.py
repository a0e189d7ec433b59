"""Configuration module for bifrost."""

from bifrost.config.loader import load_config, get_config_path
from bifrost.config.schema import BridgeConfig

__all__ = ["BridgeConfig", "load_config", "get_config_path"]
