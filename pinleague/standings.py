"""Team and individual standings."""

import logging
from typing import Iterable, Optional

from .aggregator import compute_player_stats, latest_entered_week, sheets_up_to
from .constants import FREE_AGENT_LABEL
from .handicap import display_handicap
from .models import PlayerStanding, PlayerStat, TeamGroup, TeamStanding
from .schemas import LeagueConfig, Match, Player, Sheet, Team, TeamMembership
from .scoring import sheet_totals

logger = logging.getLogger('pinleague.standings')


def resolve_player_teams(memberships: Iterable[TeamMembership]) -> dict[int, int]:
    """Map each player to the first team they're linked to."""
    team_of: dict[int, int] = {}
    for membership in memberships:
        team_of.setdefault(membership.player_id, membership.team_id)
    return team_of


def _player_rows(
    config: LeagueConfig,
    players: Iterable[Player],
    teams: Iterable[Team],
    memberships: Iterable[TeamMembership],
    sheets: list[Sheet],
    as_of_week: Optional[int],
) -> list[PlayerStanding]:
    stats = compute_player_stats(config, sheets, as_of_week)
    week = as_of_week if as_of_week is not None else latest_entered_week(sheets)
    team_names = {team.id: team.name for team in teams}
    team_of = resolve_player_teams(memberships)

    rows = []
    for player in players:
        stat = stats.get(player.id, PlayerStat())
        # Bowlers without games yet are handicapped off their stored average
        average = stat.average if stat.average > 0 else player.average
        team_id = team_of.get(player.id)
        rows.append(
            PlayerStanding(
                player_id=player.id,
                name=player.name,
                team_id=team_id,
                team_name=team_names.get(team_id, 'Team') if team_id is not None else FREE_AGENT_LABEL,
                hcp=display_handicap(config, week, player, average),
                stats=stat,
            )
        )
    return rows


def _standing_order(row: PlayerStanding) -> tuple:
    return (-row.stats.points, -row.stats.pins_handicap, row.name.casefold())


def build_player_standings(
    config: LeagueConfig,
    players: Iterable[Player],
    teams: Iterable[Team],
    memberships: Iterable[TeamMembership],
    sheets: Iterable[Sheet],
    as_of_week: Optional[int] = None,
) -> list[TeamGroup]:
    """
    Individual standings grouped by team.

    Each bowler appears once, under their first team. Within a team the
    order is points (high first), then handicap pins (high first), then
    name. Handicaps are display handicaps as of `as_of_week` (the latest
    entered week when None).

    Args:
        config: Normalized league config
        players: Player records
        teams: Teams, in the order the groups should appear
        memberships: Team memberships
        sheets: All sheets for the league
        as_of_week: Stats cutoff week, None for all weeks

    Returns:
        One TeamGroup per team
    """
    teams = list(teams)
    rows = _player_rows(config, players, teams, memberships, list(sheets), as_of_week)

    groups = []
    for team in teams:
        roster = sorted((row for row in rows if row.team_id == team.id), key=_standing_order)
        groups.append(TeamGroup(team_id=team.id, team_name=team.name, players=roster))
    return groups


def build_player_directory(
    config: LeagueConfig,
    players: Iterable[Player],
    teams: Iterable[Team],
    memberships: Iterable[TeamMembership],
    sheets: Iterable[Sheet],
    as_of_week: Optional[int] = None,
) -> list[PlayerStanding]:
    """Every player, subs and free agents included, sorted by team name then name."""
    rows = _player_rows(config, players, list(teams), memberships, list(sheets), as_of_week)
    return sorted(rows, key=lambda row: (row.team_name.casefold(), row.name.casefold()))


def build_team_standings(
    config: LeagueConfig,
    teams: Iterable[Team],
    matches: Iterable[Match],
    sheets: Iterable[Sheet],
    as_of_week: Optional[int] = None,
) -> list[TeamStanding]:
    """
    Team standings from stored match points and sheet pin totals.

    Match points come from the Match records scored at save time and are
    not recomputed here. Pins and highs come from each match's sheet;
    matches without a sheet are skipped.

    Sorted by points, then handicap pins (both high first), then name.
    """
    sheets_by_key = {sheet.key: sheet for sheet in sheets_up_to(sheets, as_of_week)}
    matches = [m for m in matches if as_of_week is None or m.week_number <= as_of_week]

    rows = []
    for team in teams:
        row = TeamStanding(team_id=team.id, name=team.name)
        played = 0

        for match in matches:
            is_home = match.home_team_id == team.id
            if not is_home and match.away_team_id != team.id:
                continue
            sheet = sheets_by_key.get(match.key)
            if sheet is None:
                continue
            played += 1

            side = sheet_totals(config, sheet).side(is_home)
            row.points += match.home_points if is_home else match.away_points
            row.pins_scratch += side.scratch
            row.pins_handicap += side.handicap
            row.high_game_scratch = max(row.high_game_scratch, side.high_game_scratch)
            row.high_game_handicap = max(row.high_game_handicap, side.high_game_handicap)
            row.high_series_scratch = max(row.high_series_scratch, side.high_series_scratch)
            row.high_series_handicap = max(row.high_series_handicap, side.high_series_handicap)

        row.games = played * config.games_per_week
        rows.append(row)

    rows.sort(key=lambda r: (-r.points, -r.pins_handicap, r.name.casefold()))
    for position, row in enumerate(rows, 1):
        row.position = position

    logger.debug(f'Built team standings for {len(rows)} teams (as_of_week={as_of_week})')
    return rows
