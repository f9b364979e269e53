"""Logger configuration: validated options and environment settings."""

from .conf import LogConf
from .settings import LogSettings, get_settings

__all__ = ["LogConf", "LogSettings", "get_settings"]
