#!/usr/bin/env python3
"""
Bowling League Standings Report

Prints team standings (and optionally individual standings) for a league
as of a week, from the league's data file.

Usage:
    python league_report.py --league 1
    python league_report.py --league 1 --week 5 --players
    python league_report.py --league 1 --excel out/standings_week_5.xlsx
"""

import argparse
import sys
from pathlib import Path

from pinleague import (
    LeagueStore,
    build_player_standings,
    build_team_standings,
    entered_weeks,
    freeze_weeks,
    latest_entered_week,
)
from pinleague.excel_export import write_standings_workbook
from pinleague.logging_config import get_logger, level_for, setup_logging


def print_team_standings(rows) -> None:
    print(f"{'Pos':>3}  {'Team':<24} {'Gms':>4} {'Pts':>6} {'Pins+H':>7} {'Pins':>6} {'HGH':>4} {'HSH':>4}")
    for r in rows:
        print(
            f"{r.position:>3}  {r.name:<24} {r.games:>4} {r.points:>6g} "
            f"{r.pins_handicap:>7} {r.pins_scratch:>6} {r.high_game_handicap:>4} {r.high_series_handicap:>4}"
        )


def print_player_standings(groups) -> None:
    for group in groups:
        print(f"\n{group.team_name}")
        print(f"  {'Bowler':<22} {'Hcp':>4} {'Ave':>6} {'Gms':>4} {'Pts':>5} {'Pins+H':>7} {'HGS':>4} {'HSS':>4}")
        for p in group.players:
            st = p.stats
            print(
                f"  {p.name:<22} {p.hcp:>4} {st.average:>6g} {st.games_played:>4} {st.points:>5g} "
                f"{st.pins_handicap:>7} {st.high_game_scratch:>4} {st.high_series_scratch:>4}"
            )


def main():
    parser = argparse.ArgumentParser(description="Bowling league standings report")
    parser.add_argument(
        "--league", "-l",
        type=int,
        required=True,
        help="League id (reads <data-dir>/league_<id>.json)",
    )
    parser.add_argument(
        "--week", "-w",
        type=int,
        default=None,
        help="Standings as of this week (defaults to all entered weeks)",
    )
    parser.add_argument(
        "--data-dir", "-d",
        default=None,
        help="Path to data directory (defaults to $PINLEAGUE_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--players", "-p",
        action="store_true",
        help="Include individual standings by team",
    )
    parser.add_argument(
        "--excel", "-x",
        default=None,
        help="Also write the standings to this .xlsx file",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress the printed report",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write the log to this file",
    )

    args = parser.parse_args()

    setup_logging(level_for(args.verbose, args.quiet), log_file=args.log_file)
    logger = get_logger('report')

    store = LeagueStore(args.data_dir) if args.data_dir else LeagueStore.from_env()
    if not store.exists(args.league):
        print(f"❌ League file not found: {store.path_for(args.league)}")
        sys.exit(1)

    data = store.load(args.league)
    config = data.league

    if not data.sheets:
        print(f"⚠️  No sheets entered yet for {config.name or f'league {args.league}'}")
        sys.exit(0)

    week = args.week if args.week is not None else latest_entered_week(data.sheets)
    logger.debug(f"Entered weeks: {entered_weeks(data.sheets)}")

    team_rows = build_team_standings(config, data.teams, data.matches, data.sheets, week)
    player_groups = None
    if args.players or args.excel:
        player_groups = build_player_standings(
            config, data.players, data.teams, data.team_players, data.sheets, week
        )

    if not args.quiet:
        locked = freeze_weeks(config)
        print("=" * 60)
        print(f"{config.name or 'League'} - standings after week {week} ({config.mode})")
        if locked:
            print(f"Handicaps locked weeks {locked[0]}-{locked[-1]}")
        print("=" * 60)
        print_team_standings(team_rows)
        if args.players:
            print_player_standings(player_groups)

    if args.excel:
        path = write_standings_workbook(
            Path(args.excel), team_rows, player_groups, title=f"Week {week}"
        )
        print(f"Standings saved to {path}")


if __name__ == "__main__":
    main()
