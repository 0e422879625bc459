"""Refresh cached player averages and handicaps after a sheet is saved."""

import logging
from typing import Iterable

from .aggregator import compute_player_stats
from .freeze import in_freeze, past_freeze
from .handicap import compute_from_average
from .models import PlayerUpdate
from .schemas import LeagueConfig, Player, Sheet

logger = logging.getLogger('pinleague.recompute')


def _fallback_average(player: Player) -> float:
    """Average for a bowler with no counted games: the start average if known."""
    if player.start_average is not None:
        return player.start_average
    return player.average


def recompute_after_save(
    config: LeagueConfig,
    sheets: Iterable[Sheet],
    week: int,
    players: Iterable[Player],
) -> dict[int, PlayerUpdate]:
    """
    Work out new cached values for every player a save affects.

    A player with at least one counted game on the sheets up to and
    including `week` has their average recomputed from those sheets. A
    player with none (say their only sheet was deleted) goes back to their
    start average, keeping their stored handicap; they only get an update
    when that changes their average. For players with games, the handicap:
        - inside the freeze window: computed from the fresh average only if
          they have no stored handicap yet, otherwise kept
        - past the freeze window (or with no window): always recomputed
        - before the window opens: kept as stored

    Nothing is mutated; apply the result with apply_player_updates().
    Running it again over the same sheet history gives the same values.

    Args:
        config: Normalized league config
        sheets: All sheets for the league, including the one just saved
        week: Week number of the saved sheet
        players: Current player records

    Returns:
        Dict of player_id -> PlayerUpdate
    """
    stats = compute_player_stats(config, sheets, week)
    frozen = in_freeze(config, week)
    recompute_hcp = past_freeze(config, week)

    updates: dict[int, PlayerUpdate] = {}
    for player in players:
        stat = stats.get(player.id)
        if stat is None or not stat.games_played:
            fallback = _fallback_average(player)
            if fallback != player.average:
                updates[player.id] = PlayerUpdate(average=fallback, hcp=player.hcp)
            continue

        hcp = player.hcp
        if recompute_hcp or (frozen and not player.has_stored_hcp):
            hcp = compute_from_average(config, stat.average, player.junior)

        updates[player.id] = PlayerUpdate(average=stat.average, hcp=hcp)

    logger.debug(
        f'Week {week}: {len(updates)} players refreshed '
        f'(frozen={frozen}, recompute_hcp={recompute_hcp})'
    )
    return updates


def apply_player_updates(
    players: Iterable[Player],
    updates: dict[int, PlayerUpdate],
) -> list[Player]:
    """Return player records with the updates applied; the inputs are left alone."""
    refreshed = []
    for player in players:
        update = updates.get(player.id)
        if update is None:
            refreshed.append(player)
        else:
            refreshed.append(player.model_copy(update={'average': update.average, 'hcp': update.hcp}))
    return refreshed
