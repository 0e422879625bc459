"""Sanity checks for match sheets before they are saved."""

from typing import Iterable

from .constants import GAME_KEYS, MAX_GAME_SCORE
from .schemas import BowlerRow, Player, Sheet


def validate_rows(side: str, rows: list[BowlerRow], known_players: set[int]) -> list[str]:
    """
    Check one side of a sheet.

    Checks:
    - Game scores within 0-300
    - Handicaps not negative
    - Bowlers refer to known players

    Args:
        side: 'home' or 'away', used in messages
        rows: Bowler rows for the side
        known_players: Player ids on the league's player list

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    for slot, row in enumerate(rows, 1):
        if not row.player_id:
            warnings.append(f'{side} row {slot} has no bowler')
            continue

        if known_players and row.player_id not in known_players:
            warnings.append(f'{side} row {slot}: unknown player {row.player_id}')

        for key in GAME_KEYS:
            value = getattr(row, key)
            if value is not None and (value < 0 or value > MAX_GAME_SCORE):
                warnings.append(
                    f'{side} row {slot}: {key} = {value} (outside 0-{MAX_GAME_SCORE})'
                )

        if row.hcp is not None and row.hcp < 0:
            warnings.append(f'{side} row {slot}: negative handicap {row.hcp}')

    return warnings


def validate_sheet(sheet: Sheet, players: Iterable[Player] = ()) -> list[str]:
    """
    Check that a sheet is plausible.

    Nothing here blocks a save; the sheet is the league secretary's record
    and is stored as entered. The warnings are logged for review.

    Checks:
    - Home and away teams differ
    - Week number is positive
    - Per-row checks from validate_rows()
    - No bowler appears twice on the sheet (blind rows excepted)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    known_players = {p.id for p in players}

    if sheet.home_team_id == sheet.away_team_id:
        warnings.append(f'Team {sheet.home_team_id} is listed as both home and away')

    if sheet.week_number <= 0:
        warnings.append(f'Week number {sheet.week_number} is not positive')

    warnings.extend(validate_rows('home', sheet.home_games, known_players))
    warnings.extend(validate_rows('away', sheet.away_games, known_players))

    seen = set()
    duplicates = set()
    for row in sheet.home_games + sheet.away_games:
        if not row.player_id or row.blind:
            continue
        if row.player_id in seen:
            duplicates.add(row.player_id)
        seen.add(row.player_id)

    if duplicates:
        warnings.append(
            f'Players bowl more than once on this sheet: {", ".join(str(p) for p in sorted(duplicates))}'
        )

    return warnings
