"""Environment-driven settings of the bind engine."""

from .app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
