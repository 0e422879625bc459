"""JSON-file persistence for league data.

Each league lives in its own file, data/league_<id>.json, holding the league
record, players, teams, memberships, weeks, matches and sheets. The scoring
engine never touches these files; this module loads a snapshot, runs the
engine over it and writes the result back.

Saving a sheet and refreshing player averages must not interleave with
another save for the same league, so each league has its own lock.
"""

import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .constants import DATA_DIR_ENV, DEFAULT_DATA_DIR
from .handicap import handicap_for_week
from .recompute import apply_player_updates, recompute_after_save
from .schemas import BowlerRow, LeagueData, Match, Sheet, Week
from .scoring import score_sheet
from .utils import load_json, save_json
from .validators import validate_sheet

logger = logging.getLogger('pinleague.league_store')

# Write locks keyed by (resolved data dir, league id), shared by every store
_LOCKS: dict[tuple[Path, int], threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _next_id(records: Iterable[Any]) -> int:
    return max((r.id or 0 for r in records), default=0) + 1


class LeagueStore:
    """
    Load and save league data files.

    Example:
        store = LeagueStore('data')
        match = store.save_sheet(1, week_number=3, home_team_id=1, away_team_id=2,
                                 home_games=[...], away_games=[...])
    """

    def __init__(self, data_dir: Path | str = DEFAULT_DATA_DIR):
        self.data_dir = Path(data_dir)

    @classmethod
    def from_env(cls) -> 'LeagueStore':
        """Store rooted at $PINLEAGUE_DATA_DIR, or ./data."""
        return cls(os.environ.get(DATA_DIR_ENV, DEFAULT_DATA_DIR))

    def path_for(self, league_id: int) -> Path:
        return self.data_dir / f'league_{league_id}.json'

    def exists(self, league_id: int) -> bool:
        return self.path_for(league_id).exists()

    def lock_for(self, league_id: int) -> threading.Lock:
        """The lock that serializes writes for one league file, across stores."""
        key = (self.data_dir.resolve(), league_id)
        with _LOCKS_GUARD:
            return _LOCKS.setdefault(key, threading.Lock())

    def load(self, league_id: int) -> LeagueData:
        """
        Load a league's data file.

        Raises:
            FileNotFoundError: If the league has no data file
            ValueError: If the file doesn't match the LeagueData schema
        """
        return load_json(self.path_for(league_id), schema=LeagueData)

    def save(self, data: LeagueData) -> Path:
        """Write a league's data file, keyed by the league record's id."""
        if data.league.id is None:
            raise ValueError('League record has no id')
        path = self.path_for(data.league.id)
        save_json(path, data)
        return path

    def find_sheet(
        self, league_id: int, week_number: int, home_team_id: int, away_team_id: int
    ) -> Sheet | None:
        key = (week_number, home_team_id, away_team_id)
        return next((s for s in self.load(league_id).sheets if s.key == key), None)

    def save_sheet(
        self,
        league_id: int,
        week_number: int,
        home_team_id: int,
        away_team_id: int,
        home_games: list[BowlerRow | dict[str, Any]],
        away_games: list[BowlerRow | dict[str, Any]],
    ) -> Match:
        """
        Save a match sheet, score it and refresh player averages/handicaps.

        A sheet for the same week and teams is replaced outright. The match
        record for the sheet gets its scratch series and the points the
        sheet is worth to each side.

        Raises:
            ValueError: If the week or either team id is missing
            FileNotFoundError: If the league has no data file

        Returns:
            The stored Match
        """
        if not week_number or not home_team_id or not away_team_id:
            raise ValueError('week_number, home_team_id and away_team_id are required')

        with self.lock_for(league_id):
            data = self.load(league_id)
            config = data.league

            sheet = Sheet(
                week_number=week_number,
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                home_games=home_games,
                away_games=away_games,
                league_id=league_id,
                saved_at=datetime.now(timezone.utc).isoformat(),
            )
            for warning in validate_sheet(sheet, data.players):
                logger.warning(f'League {league_id} week {week_number}: {warning}')

            sheets = [s for s in data.sheets if s.key != sheet.key]
            sheets.append(sheet)

            weeks = list(data.weeks)
            if not any(w.week_number == week_number for w in weeks):
                weeks.append(Week(id=_next_id(weeks), week_number=week_number))

            score = score_sheet(config, sheet)
            existing = next((m for m in data.matches if m.key == sheet.key), None)
            match = Match(
                id=existing.id if existing else _next_id(data.matches),
                week_number=week_number,
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                home_score=score.home_scratch,
                away_score=score.away_scratch,
                home_points=score.home_points,
                away_points=score.away_points,
            )
            matches = [m for m in data.matches if m.key != sheet.key]
            matches.append(match)

            updates = recompute_after_save(config, sheets, week_number, data.players)
            players = apply_player_updates(data.players, updates)

            self.save(
                data.model_copy(
                    update={'sheets': sheets, 'weeks': weeks, 'matches': matches, 'players': players}
                )
            )

        logger.info(
            f'League {league_id} week {week_number}: saved {home_team_id} v {away_team_id} '
            f'({match.home_points:g}-{match.away_points:g}), {len(updates)} players refreshed'
        )
        return match

    def delete_sheet(
        self, league_id: int, week_number: int, home_team_id: int, away_team_id: int
    ) -> bool:
        """
        Remove a sheet and its match result, then refresh player averages.

        Players are recomputed as of the latest week that still has a sheet.

        Returns:
            True if a sheet was removed, False if there was none
        """
        if not week_number or not home_team_id or not away_team_id:
            raise ValueError('week_number, home_team_id and away_team_id are required')

        key = (week_number, home_team_id, away_team_id)
        with self.lock_for(league_id):
            data = self.load(league_id)
            sheets = [s for s in data.sheets if s.key != key]
            if len(sheets) == len(data.sheets):
                logger.info(f'League {league_id}: no sheet for week {week_number} {home_team_id} v {away_team_id}')
                return False

            matches = [m for m in data.matches if m.key != key]
            last_week = max((s.week_number for s in sheets), default=0)
            updates = recompute_after_save(data.league, sheets, last_week, data.players)
            players = apply_player_updates(data.players, updates)

            self.save(
                data.model_copy(update={'sheets': sheets, 'matches': matches, 'players': players})
            )

        logger.info(f'League {league_id}: deleted week {week_number} {home_team_id} v {away_team_id}')
        return True

    def handicaps_for_sheet(
        self, league_id: int, week_number: int, player_ids: Iterable[int]
    ) -> dict[int, int]:
        """Handicaps to pre-fill on a new sheet for the given bowlers."""
        data = self.load(league_id)
        wanted = set(player_ids)
        return {
            p.id: handicap_for_week(data.league, week_number, p)
            for p in data.players
            if p.id in wanted
        }
