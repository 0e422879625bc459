"""Per-game handicap calculation."""

import logging

from .freeze import in_freeze
from .schemas import LeagueConfig, Player
from .utils import round_half_up

logger = logging.getLogger('pinleague.handicap')


def cap_handicap(config: LeagueConfig, hcp: float, junior: bool = False) -> int:
    """
    Clamp a handicap at 0 and at the league's adult/junior cap.

    A cap of 0 means the league doesn't cap that group.
    """
    cap = config.handicap_cap_junior if junior else config.handicap_cap_adult
    value = max(0, int(round_half_up(hcp)))
    if cap > 0:
        return min(int(cap), value)
    return value


def compute_from_average(config: LeagueConfig, average: float, junior: bool = False) -> int:
    """
    Handicap a bowler gets from an average.

    Formula: (base - average) x percent / 100, rounded half up, never below 0.
    Scratch leagues have no handicap at all.

    Example:
        base 200, percent 90, average 150 -> round(50 x 0.9) = 45
    """
    if config.is_scratch:
        return 0
    raw = (config.handicap_base - (average or 0)) * config.handicap_percent / 100
    return cap_handicap(config, max(0.0, raw), junior)


def handicap_for_week(config: LeagueConfig, week: int, player: Player) -> int:
    """
    Handicap to write on a new sheet row for `week`.

    A stored handicap always wins, whether or not the week is frozen;
    stored values are entered or locked deliberately and are not capped.
    Only a bowler without one gets a handicap from their current average.
    """
    if player.has_stored_hcp:
        return int(player.hcp)
    hcp = compute_from_average(config, player.average, player.junior)
    logger.debug(f'Week {week}: player {player.id} has no stored handicap, computed {hcp}')
    return hcp


def display_handicap(
    config: LeagueConfig,
    as_of_week: int,
    player: Player,
    average: float,
) -> int:
    """
    Handicap shown in read-only views as of a week.

    Inside the freeze window the stored handicap is shown when there is one.
    Outside it the handicap is recomputed from `average` (the bowler's
    average as of that week), ignoring the stored value.
    """
    if in_freeze(config, as_of_week) and player.has_stored_hcp:
        return int(player.hcp)
    return compute_from_average(config, average, player.junior)
