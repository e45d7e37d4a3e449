"""
EventTarget Config: Target Settings
=====================================
Per-target knobs, with process-wide defaults that can be read from
the environment.

Environment variables:
  EVENTTARGET_LOG_LISTENER_FAILURES   1/true/yes/on | 0/false/no/off
  EVENTTARGET_THREAD_SAFE             1/true/yes/on | 0/false/no/off
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from eventtarget.scheduling.scheduler import Scheduler, get_default_scheduler
from eventtarget.time.clock import Clock, get_default_clock

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


# ══════════════════════════════════════════════════════════════
# TARGET SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TargetSettings:
    """
    Configuration for one EventTarget.

    clock and scheduler default to the process defaults at the moment
    the settings object is built.
    """

    clock: Clock = field(default_factory=get_default_clock)
    scheduler: Scheduler = field(default_factory=get_default_scheduler)
    log_listener_failures: bool = True
    thread_safe: bool = True


def _parse_flag(name: str, raw: Optional[str], default: bool) -> bool:
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}.")


def settings_from_env(
    environ: Optional[Mapping[str, str]] = None,
) -> TargetSettings:
    """Build settings from environment variables (os.environ by default)."""
    env = os.environ if environ is None else environ
    return TargetSettings(
        log_listener_failures=_parse_flag(
            "EVENTTARGET_LOG_LISTENER_FAILURES",
            env.get("EVENTTARGET_LOG_LISTENER_FAILURES"),
            True,
        ),
        thread_safe=_parse_flag(
            "EVENTTARGET_THREAD_SAFE",
            env.get("EVENTTARGET_THREAD_SAFE"),
            True,
        ),
    )


# ══════════════════════════════════════════════════════════════
# DEFAULT SETTINGS
# ══════════════════════════════════════════════════════════════

_default_settings: Optional[TargetSettings] = None


def set_default_settings(settings: Optional[TargetSettings]) -> None:
    """Override the default settings; None restores environment loading."""
    global _default_settings
    _default_settings = settings


def get_default_settings() -> TargetSettings:
    """
    Settings used by targets built without explicit settings.

    Without an override, settings are rebuilt from the environment on
    each call so clock/scheduler overrides are picked up.
    """
    if _default_settings is not None:
        return _default_settings
    return settings_from_env()
