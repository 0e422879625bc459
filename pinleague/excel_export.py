"""Standings workbook export."""

from pathlib import Path

import openpyxl
from openpyxl.styles import Font

from .models import TeamGroup, TeamStanding

TEAM_HEADERS = [
    'Pos', 'Team', 'Games', 'Points', 'Pins (Hcp)', 'Pins (Scr)',
    'HG (Hcp)', 'HG (Scr)', 'HS (Hcp)', 'HS (Scr)',
]
PLAYER_HEADERS = [
    'Team', 'Bowler', 'Hcp', 'Ave', 'Games', 'Points', 'Pins (Hcp)', 'Pins (Scr)',
    'HG (Hcp)', 'HG (Scr)', 'HS (Hcp)', 'HS (Scr)',
]


def _write_header(ws, headers: list[str]) -> None:
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    ws.freeze_panes = 'A2'


def write_standings_workbook(
    path: str | Path,
    team_rows: list[TeamStanding],
    player_groups: list[TeamGroup] | None = None,
    title: str = 'Standings',
) -> Path:
    """
    Write team (and optionally individual) standings to an .xlsx file.

    Args:
        path: Output workbook path
        team_rows: Team standings, already ordered
        player_groups: Individual standings grouped by team (optional)
        title: Name of the team standings sheet

    Returns:
        Path the workbook was written to
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title[:31]
    _write_header(ws, TEAM_HEADERS)
    for row in team_rows:
        ws.append([
            row.position, row.name, row.games, row.points,
            row.pins_handicap, row.pins_scratch,
            row.high_game_handicap, row.high_game_scratch,
            row.high_series_handicap, row.high_series_scratch,
        ])
    ws.column_dimensions['B'].width = 28

    if player_groups is not None:
        ws = wb.create_sheet('Bowlers')
        _write_header(ws, PLAYER_HEADERS)
        for group in player_groups:
            for player in group.players:
                st = player.stats
                ws.append([
                    group.team_name, player.name, player.hcp, st.average, st.games_played,
                    st.points, st.pins_handicap, st.pins_scratch,
                    st.high_game_handicap, st.high_game_scratch,
                    st.high_series_handicap, st.high_series_scratch,
                ])
        ws.column_dimensions['A'].width = 28
        ws.column_dimensions['B'].width = 28

    wb.save(path)
    wb.close()
    return path
