"""
EventTarget Config: Public API
================================
"""

from eventtarget.config.settings import (
    TargetSettings,
    get_default_settings,
    set_default_settings,
    settings_from_env,
)

__all__ = [
    "TargetSettings",
    "settings_from_env",
    "get_default_settings",
    "set_default_settings",
]
