"""Points allocation for team and individual competitions.

Scoring per sheet:
    - Team, per game: each side's pins for the game (plus every bowler's
      handicap in handicap leagues), 3 comparisons
    - Team, series: each side's pins over all three games, 1 comparison
    - Individual, per game: the Nth bowler on one side against the Nth
      bowler on the other, by list position, up to 3 comparisons per slot

A win earns the win points, a draw earns the draw points to both sides, a
loss earns nothing.
"""

from itertools import zip_longest

from .constants import GAME_KEYS
from .models import MatchScore, SheetTotals, SideTotals
from .schemas import BowlerRow, LeagueConfig, Sheet


def outcome(a: float, b: float, win_pts: float, draw_pts: float) -> tuple[float, float]:
    """Split points between two compared values: (points for a, points for b)."""
    if a == b:
        return draw_pts, draw_pts
    return (win_pts, 0) if a > b else (0, win_pts)


def blind_aware_outcome(
    a: float,
    b: float,
    a_blind: bool,
    b_blind: bool,
    win_pts: float,
    draw_pts: float,
) -> tuple[float, float]:
    """
    Like outcome(), but a blind score can never earn points.

    A bowler facing a blind only wins by beating the blind score outright;
    a tie or loss against a blind earns nobody anything.
    """
    if a_blind and b_blind:
        return 0, 0
    if a_blind:
        return (0, win_pts) if b > a else (0, 0)
    if b_blind:
        return (win_pts, 0) if a > b else (0, 0)
    return outcome(a, b, win_pts, draw_pts)


def team_points(config: LeagueConfig, pins_a: float, pins_b: float) -> tuple[float, float]:
    """Team points for one team-level comparison."""
    return outcome(pins_a, pins_b, config.team_points_win, config.team_points_draw)


def game_pins(config: LeagueConfig, row: BowlerRow, key: str) -> int:
    """A row's pins for one game, with its handicap unless the league is scratch."""
    if config.is_scratch:
        return row.game(key)
    return row.game(key) + row.handicap


def scratch_series(row: BowlerRow) -> int:
    return sum(row.game(key) for key in GAME_KEYS)


def handicap_series(config: LeagueConfig, row: BowlerRow) -> int:
    """Scratch series plus the handicap once per game column on the sheet."""
    # A sheet row always has three game columns, whatever games_per_week says
    if config.is_scratch:
        return scratch_series(row)
    return scratch_series(row) + row.handicap * len(GAME_KEYS)


def bowled_rows(rows: list[BowlerRow]) -> list[BowlerRow]:
    """Rows that belong to a bowler; rows without a player id are skipped."""
    return [row for row in rows if row.player_id]


def head_to_head(
    config: LeagueConfig,
    home_row: BowlerRow,
    away_row: BowlerRow,
    key: str,
) -> tuple[float, float] | None:
    """
    Individual points for one game between two paired rows.

    Returns None when either bowler has no positive score for the game;
    that game simply isn't contested.
    """
    if home_row.game(key) <= 0 or away_row.game(key) <= 0:
        return None
    return blind_aware_outcome(
        game_pins(config, home_row, key),
        game_pins(config, away_row, key),
        home_row.blind,
        away_row.blind,
        config.indiv_points_win,
        config.indiv_points_draw,
    )


def score_sheet(config: LeagueConfig, sheet: Sheet) -> MatchScore:
    """
    Score a saved sheet into match points for both sides.

    Args:
        config: Normalized league config
        sheet: The match sheet

    Returns:
        MatchScore with team points (4 comparisons), individual points
        (head-to-head by row position) and scratch series per side
    """
    result = MatchScore()
    home_rows, away_rows = sheet.home_games, sheet.away_games

    # Team games
    home_series = away_series = 0
    for key in GAME_KEYS:
        home_game = sum(game_pins(config, row, key) for row in home_rows)
        away_game = sum(game_pins(config, row, key) for row in away_rows)
        home_series += home_game
        away_series += away_game
        home_pts, away_pts = team_points(config, home_game, away_game)
        result.home_team_points += home_pts
        result.away_team_points += away_pts

    # Team series
    home_pts, away_pts = team_points(config, home_series, away_series)
    result.home_team_points += home_pts
    result.away_team_points += away_pts

    # Individual head-to-head
    for home_row, away_row in zip_longest(bowled_rows(home_rows), bowled_rows(away_rows)):
        home_row_pts = away_row_pts = 0.0
        if home_row is not None and away_row is not None:
            for key in GAME_KEYS:
                split = head_to_head(config, home_row, away_row, key)
                if split is None:
                    continue
                home_row_pts += split[0]
                away_row_pts += split[1]
        if home_row is not None:
            result.home_row_points.append(home_row_pts)
        if away_row is not None:
            result.away_row_points.append(away_row_pts)

    result.home_individual_points = sum(result.home_row_points)
    result.away_individual_points = sum(result.away_row_points)
    result.home_scratch = sum(scratch_series(row) for row in home_rows)
    result.away_scratch = sum(scratch_series(row) for row in away_rows)
    return result


def _side_totals(config: LeagueConfig, rows: list[BowlerRow]) -> SideTotals:
    totals = SideTotals()
    for row in rows:
        totals.scratch += scratch_series(row)
        totals.handicap += handicap_series(config, row)
        totals.high_game_scratch = max(
            totals.high_game_scratch, max(row.game(key) for key in GAME_KEYS)
        )
        totals.high_game_handicap = max(
            totals.high_game_handicap, max(game_pins(config, row, key) for key in GAME_KEYS)
        )
        totals.high_series_scratch = max(totals.high_series_scratch, scratch_series(row))
        totals.high_series_handicap = max(
            totals.high_series_handicap, handicap_series(config, row)
        )
    return totals


def sheet_totals(config: LeagueConfig, sheet: Sheet) -> SheetTotals:
    """Pins and individual highs for each side of a sheet, blinds included."""
    return SheetTotals(
        home=_side_totals(config, sheet.home_games),
        away=_side_totals(config, sheet.away_games),
    )
