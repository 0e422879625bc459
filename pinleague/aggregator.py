"""Player stats aggregated from match sheet history."""

import logging
from collections import Counter, defaultdict
from itertools import zip_longest
from typing import Iterable, Optional

from .constants import GAME_KEYS
from .models import PlayerStat
from .schemas import BowlerRow, LeagueConfig, Sheet
from .scoring import bowled_rows, game_pins, handicap_series, head_to_head, scratch_series
from .utils import round_half_up

logger = logging.getLogger('pinleague.aggregator')


def sheets_up_to(sheets: Iterable[Sheet], cutoff_week: Optional[int] = None) -> list[Sheet]:
    """Sheets with week_number <= cutoff_week (all of them when cutoff is None)."""
    return [s for s in sheets if cutoff_week is None or s.week_number <= cutoff_week]


def latest_entered_week(sheets: Iterable[Sheet]) -> int:
    """Highest week with a saved sheet, or 0 before any sheet is entered."""
    return max((s.week_number for s in sheets), default=0)


def entered_weeks(sheets: Iterable[Sheet]) -> list[dict[str, int]]:
    """
    Weeks that have at least one saved sheet, in order.

    Returns:
        List of {'week_number': N, 'sheet_count': count}
    """
    counts = Counter(s.week_number for s in sheets)
    return [{'week_number': week, 'sheet_count': counts[week]} for week in sorted(counts)]


def _count_game(config: LeagueConfig, stat: PlayerStat, row: BowlerRow, key: str) -> None:
    pins = row.game(key)
    stat.games_played += 1
    stat.pins_scratch += pins
    stat.pins_handicap += game_pins(config, row, key)
    stat.high_game_scratch = max(stat.high_game_scratch, pins)
    stat.high_game_handicap = max(stat.high_game_handicap, game_pins(config, row, key))


def _count_series(config: LeagueConfig, stat: PlayerStat, row: BowlerRow) -> None:
    stat.high_series_scratch = max(stat.high_series_scratch, scratch_series(row))
    stat.high_series_handicap = max(stat.high_series_handicap, handicap_series(config, row))


def compute_player_stats(
    config: LeagueConfig,
    sheets: Iterable[Sheet],
    cutoff_week: Optional[int] = None,
) -> dict[int, PlayerStat]:
    """
    Build per-player stats from every sheet up to a week.

    Home and away rows are paired by list position. For each game:
        - A non-blind row with a positive score counts as a game played
          (scratch pins, handicap pins, high game)
        - When both paired rows have a positive score, the individual
          head-to-head points go to both players
    A row's blank or zero game is left out of that game only; its high
    series is still taken from its own three games.

    Args:
        config: Normalized league config
        sheets: All sheets for the league
        cutoff_week: Last week to include (inclusive), None for all weeks

    Returns:
        Dict of player_id -> PlayerStat for every bowler on an included,
        non-blind row
    """
    stats: dict[int, PlayerStat] = defaultdict(PlayerStat)
    included = sheets_up_to(sheets, cutoff_week)

    for sheet in included:
        home_rows = bowled_rows(sheet.home_games)
        away_rows = bowled_rows(sheet.away_games)

        for home_row, away_row in zip_longest(home_rows, away_rows):
            present = [row for row in (home_row, away_row) if row is not None and not row.blind]

            for key in GAME_KEYS:
                for row in present:
                    if row.game(key) > 0:
                        _count_game(config, stats[row.player_id], row, key)

                if home_row is None or away_row is None:
                    continue
                split = head_to_head(config, home_row, away_row, key)
                if split is None:
                    continue
                home_pts, away_pts = split
                if home_pts:
                    stats[home_row.player_id].points += home_pts
                if away_pts:
                    stats[away_row.player_id].points += away_pts

            for row in present:
                _count_series(config, stats[row.player_id], row)

    for stat in stats.values():
        stat.average = (
            round_half_up(stat.pins_scratch / stat.games_played, 1) if stat.games_played else 0
        )

    logger.debug(
        f'Aggregated {len(stats)} players from {len(included)} sheets (cutoff={cutoff_week})'
    )
    return dict(stats)
