"""Configuration models and the lazily loaded global settings."""

from .config import Config, CurationConfig, LazyConfig, MonitoringConfig, find_config_file, settings

__all__ = ["Config", "CurationConfig", "MonitoringConfig", "LazyConfig", "find_config_file", "settings"]
