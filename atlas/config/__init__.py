"""Configuration module: exports Settings and load_config."""

from atlas.config.loader import load_config
from atlas.config.settings import Settings

__all__ = ["Settings", "load_config"]
