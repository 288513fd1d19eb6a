"""Configuration for the HTTP helper."""

from .settings import HttpSettings, load_settings

__all__ = ["HttpSettings", "load_settings"]
