"""Handicap freeze (lock) window.

A league can hold handicaps constant for a run of weeks, starting at
hcpLockFromWeek and lasting hcpLockWeeks. With hcpLockWeeks == 0 there is no
window and every week counts as past it.
"""

import math

from .schemas import LeagueConfig


def _last_locked_week(config: LeagueConfig) -> float:
    return config.hcp_lock_from_week + config.hcp_lock_weeks - 1


def in_freeze(config: LeagueConfig, week: float) -> bool:
    """True when `week` falls inside the lock window."""
    return (
        config.hcp_lock_weeks > 0
        and config.hcp_lock_from_week <= week <= _last_locked_week(config)
    )


def past_freeze(config: LeagueConfig, week: float) -> bool:
    """True when there is no lock window or `week` is after it."""
    return config.hcp_lock_weeks == 0 or week > _last_locked_week(config)


def freeze_weeks(config: LeagueConfig) -> list[int]:
    """Whole week numbers covered by the lock window, for display."""
    if config.hcp_lock_weeks <= 0:
        return []
    first = math.ceil(config.hcp_lock_from_week)
    last = math.floor(_last_locked_week(config))
    return list(range(first, last + 1))
