"""League configuration normalization."""

from collections.abc import Mapping
from typing import Any

from .constants import (
    DEFAULT_GAMES_PER_WEEK,
    DEFAULT_HANDICAP_BASE,
    DEFAULT_HANDICAP_PERCENT,
    DEFAULT_HCP_LOCK_FROM_WEEK,
    DEFAULT_HCP_LOCK_WEEKS,
    SCRATCH_MODE,
)
from .schemas import LeagueConfig
from .utils import to_number

# Numeric settings that only need to be finite: field name -> default
_FINITE_FIELDS = {
    'hcp_lock_from_week': DEFAULT_HCP_LOCK_FROM_WEEK,
    'hcp_lock_weeks': DEFAULT_HCP_LOCK_WEEKS,
    'team_points_win': 0,
    'team_points_draw': 0,
    'indiv_points_win': 0,
    'indiv_points_draw': 0,
}

_CAP_FIELDS = ('handicap_cap_adult', 'handicap_cap_junior')


def _lookup(raw: Mapping[str, Any], field_name: str) -> Any:
    """Read a setting by its stored camelCase key, falling back to the field name."""
    alias = LeagueConfig.model_fields[field_name].alias
    if alias and alias in raw:
        return raw[alias]
    return raw.get(field_name)


def _positive(value: Any, default: float) -> float:
    number = to_number(value)
    return number if number is not None and number > 0 else default


def _positive_int(value: Any, default: int) -> int:
    number = to_number(value)
    if number is None or number <= 0 or not number.is_integer():
        return default
    return int(number)


def normalize_league(raw: Mapping[str, Any] | LeagueConfig | None) -> LeagueConfig:
    """
    Fill in and sanitize a league's scoring settings.

    Never raises: anything missing, non-numeric, NaN or out of range falls
    back to its default. Keys the engine doesn't know about (pin, officials,
    and so on) are carried through untouched.

    Defaults:
        mode: 'handicap' unless exactly 'scratch'
        handicapBase: 200 (must be positive)
        handicapPercent: 90 (must be positive)
        gamesPerWeek: 3 (must be a positive integer)
        hcpLockFromWeek: 1, hcpLockWeeks: 0 (any finite number)
        team/indiv points win/draw: 0 (any finite number)
        handicap caps: 0, meaning no cap (clamped at 0)

    Args:
        raw: League record as stored, an already-normalized config, or None

    Returns:
        LeagueConfig with every field defined

    Example:
        config = normalize_league({'handicapBase': '210', 'gamesPerWeek': 0})
        config.handicap_base  # 210.0
        config.games_per_week  # 3
    """
    if isinstance(raw, LeagueConfig):
        raw = raw.model_dump(by_alias=True)
    elif not isinstance(raw, Mapping):
        raw = {}

    known_keys = set()
    for name, info in LeagueConfig.model_fields.items():
        known_keys.add(name)
        if info.alias:
            known_keys.add(info.alias)

    settings: dict[str, Any] = {key: value for key, value in raw.items() if key not in known_keys}

    league_id = to_number(raw.get('id'))
    settings['id'] = int(league_id) if league_id is not None else None
    name = raw.get('name')
    settings['name'] = name if isinstance(name, str) else ''

    settings['mode'] = SCRATCH_MODE if raw.get('mode') == SCRATCH_MODE else 'handicap'
    settings['handicap_base'] = _positive(_lookup(raw, 'handicap_base'), DEFAULT_HANDICAP_BASE)
    settings['handicap_percent'] = _positive(
        _lookup(raw, 'handicap_percent'), DEFAULT_HANDICAP_PERCENT
    )
    settings['games_per_week'] = _positive_int(
        _lookup(raw, 'games_per_week'), DEFAULT_GAMES_PER_WEEK
    )

    for field_name, default in _FINITE_FIELDS.items():
        number = to_number(_lookup(raw, field_name))
        settings[field_name] = default if number is None else number

    for field_name in _CAP_FIELDS:
        number = to_number(_lookup(raw, field_name))
        settings[field_name] = 0 if number is None else max(0.0, number)

    return LeagueConfig(**settings)
