"""Configuration module - exports Settings and load_config."""

from memstash.config.loader import load_config
from memstash.config.settings import Settings

__all__ = ["Settings", "load_config"]
