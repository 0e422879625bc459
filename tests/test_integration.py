"""Integration tests for end-to-end save and standings workflows."""

import json
import logging
import sys

import openpyxl
import pytest

import league_report
from pinleague.excel_export import write_standings_workbook
from pinleague.league_store import LeagueStore
from pinleague.logging_config import get_logger, level_for, setup_logging
from pinleague.standings import build_player_standings, build_team_standings


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a data directory with one league file, no sheets yet."""
    data_dir = tmp_path / 'data'
    data_dir.mkdir()

    league = {
        'league': {
            'id': 1,
            'name': 'Tuesday Mixed',
            'pin': '4321',
            'mode': 'handicap',
            'handicapBase': 200,
            'handicapPercent': 90,
            'gamesPerWeek': 3,
            'hcpLockFromWeek': 2,
            'hcpLockWeeks': 2,
            'teamPointsWin': 2,
            'teamPointsDraw': 1,
            'indivPointsWin': 1,
            'indivPointsDraw': 0,
        },
        'players': [
            {'id': 1, 'name': 'Alex', 'average': 150, 'hcp': None, 'start_average': 150},
            {'id': 2, 'name': 'Blake', 'average': 160, 'hcp': None, 'start_average': 160},
            {'id': 3, 'name': 'Casey', 'average': 170, 'hcp': 28, 'start_average': 170},
            {'id': 4, 'name': 'Drew', 'average': 140, 'hcp': None, 'start_average': 140},
        ],
        'teams': [{'id': 1, 'name': 'Strikers'}, {'id': 2, 'name': 'Gutter Gang'}],
        'team_players': [
            {'team_id': 1, 'player_id': 1},
            {'team_id': 1, 'player_id': 2},
            {'team_id': 2, 'player_id': 3},
            {'team_id': 2, 'player_id': 4},
        ],
        'weeks': [],
        'matches': [],
        'sheets': [],
    }
    with open(data_dir / 'league_1.json', 'w') as f:
        json.dump(league, f, indent=2)

    return data_dir


@pytest.fixture
def reset_logging():
    """Drop handlers setup_logging() adds so they don't outlive the test."""
    yield
    logger = logging.getLogger('pinleague')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def week_rows(store, week, home_games, away_games):
    """Sheet rows with the handicaps the store would pre-fill."""
    hcps = store.handicaps_for_sheet(1, week, [pid for pid, _ in home_games + away_games])

    def rows(side):
        return [
            {'playerId': pid, 'g1': g[0], 'g2': g[1], 'g3': g[2], 'hcp': hcps[pid]}
            for pid, g in side
        ]

    return rows(home_games), rows(away_games)


class TestLeagueStore:
    """Tests for loading and saving league files."""

    def test_load(self, temp_data_dir):
        data = LeagueStore(temp_data_dir).load(1)
        assert data.league.name == 'Tuesday Mixed'
        assert data.league.handicap_base == 200
        assert len(data.players) == 4

    def test_missing_league(self, temp_data_dir):
        with pytest.raises(FileNotFoundError):
            LeagueStore(temp_data_dir).load(99)

    def test_invalid_file(self, temp_data_dir):
        (temp_data_dir / 'league_2.json').write_text(json.dumps({'league': {}, 'players': 'nope'}))
        with pytest.raises(ValueError):
            LeagueStore(temp_data_dir).load(2)

    def test_blank_team_name_defaults(self, temp_data_dir):
        """Test a team saved without a name still loads, as 'Team'."""
        path = temp_data_dir / 'league_1.json'
        raw = json.loads(path.read_text())
        raw['teams'] = [{'id': 1, 'name': ''}, {'id': 2, 'name': None}, {'id': 3}]
        path.write_text(json.dumps(raw))

        teams = LeagueStore(temp_data_dir).load(1).teams
        assert [t.name for t in teams] == ['Team', 'Team', 'Team']

    def test_from_env(self, temp_data_dir, monkeypatch):
        monkeypatch.setenv('PINLEAGUE_DATA_DIR', str(temp_data_dir))
        assert LeagueStore.from_env().exists(1)

    def test_handicaps_for_sheet(self, temp_data_dir):
        store = LeagueStore(temp_data_dir)
        assert store.handicaps_for_sheet(1, 1, [1, 2, 3, 4]) == {1: 45, 2: 36, 3: 28, 4: 54}

    def test_lock_shared_between_stores(self, temp_data_dir, monkeypatch):
        """Test stores on the same data dir hand out the same league lock."""
        monkeypatch.chdir(temp_data_dir.parent)
        first = LeagueStore(temp_data_dir)
        second = LeagueStore('data')
        assert first.lock_for(1) is second.lock_for(1)
        assert first.lock_for(1) is not first.lock_for(2)
        assert first.lock_for(1) is not LeagueStore(temp_data_dir.parent).lock_for(1)

    def test_save_requires_keys(self, temp_data_dir):
        with pytest.raises(ValueError):
            LeagueStore(temp_data_dir).save_sheet(1, 0, 1, 2, [], [])


class TestSaveSheetWorkflow:
    """Tests for saving sheets through the store."""

    def test_save_scores_match_and_refreshes_players(self, temp_data_dir):
        store = LeagueStore(temp_data_dir)
        home, away = week_rows(
            store, 1,
            [(1, (150, 150, 150)), (2, (160, 160, 160))],
            [(3, (170, 170, 170)), (4, (140, 140, 140))],
        )
        match = store.save_sheet(1, 1, 1, 2, home, away)

        # Home 195+196 = 391 a game v away 198+194 = 392: away takes 3 games and series
        # Alex 195 v Casey 198 loses all three; Blake 196 v Drew 194 wins all three
        assert match.home_points == 3
        assert match.away_points == 11
        assert match.home_score == 930
        assert match.away_score == 930

        data = store.load(1)
        assert [w.week_number for w in data.weeks] == [1]
        assert len(data.sheets) == 1
        assert data.sheets[0].saved_at is not None
        players = {p.id: p for p in data.players}
        # Week 1 is before the lock window: averages refresh, handicaps don't
        assert players[1].average == 150.0
        assert players[1].hcp is None
        assert players[3].hcp == 28
        # Unknown keys on the league record survive a save
        raw = json.loads((temp_data_dir / 'league_1.json').read_text())
        assert raw['league']['pin'] == '4321'
        assert raw['sheets'][0]['homeGames'][0]['playerId'] == 1

    def test_resave_overwrites(self, temp_data_dir):
        store = LeagueStore(temp_data_dir)
        home, away = week_rows(store, 1, [(1, (150, 150, 150))], [(3, (170, 170, 170))])
        first = store.save_sheet(1, 1, 1, 2, home, away)

        home, away = week_rows(store, 1, [(1, (200, 200, 200))], [(3, (170, 170, 170))])
        second = store.save_sheet(1, 1, 1, 2, home, away)

        data = store.load(1)
        assert len(data.sheets) == 1
        assert len(data.matches) == 1
        assert second.id == first.id
        assert data.sheets[0].home_games[0].g1 == 200
        assert {p.id: p for p in data.players}[1].average == 200.0

    def test_freeze_window_through_store(self, temp_data_dir):
        """Test handicaps lock in week 2, hold in week 3 and refresh in week 4."""
        store = LeagueStore(temp_data_dir)
        for week, games in ((1, (150, 150, 150)), (2, (150, 150, 150)), (3, (210, 210, 210))):
            home, away = week_rows(store, week, [(1, games)], [(4, (140, 140, 140))])
            store.save_sheet(1, week, 1, 2, home, away)

        alex = {p.id: p for p in store.load(1).players}[1]
        # Locked at 45 in week 2; week 3 average (450 + 450 + 630) / 9 = 170 doesn't move it
        assert alex.average == 170.0
        assert alex.hcp == 45

        home, away = week_rows(store, 4, [(1, (170, 170, 170))], [(4, (140, 140, 140))])
        assert home[0]['hcp'] == 45
        store.save_sheet(1, 4, 1, 2, home, away)
        alex = {p.id: p for p in store.load(1).players}[1]
        assert alex.average == 170.0
        assert alex.hcp == 27

    def test_delete_sheet(self, temp_data_dir):
        store = LeagueStore(temp_data_dir)
        for week, games in ((1, (150, 150, 150)), (2, (210, 210, 210))):
            home, away = week_rows(store, week, [(1, games)], [(4, (140, 140, 140))])
            store.save_sheet(1, week, 1, 2, home, away)

        assert store.delete_sheet(1, 2, 1, 2) is True
        assert store.delete_sheet(1, 2, 1, 2) is False

        data = store.load(1)
        assert len(data.sheets) == 1
        assert len(data.matches) == 1
        assert {p.id: p for p in data.players}[1].average == 150.0
        assert store.find_sheet(1, 2, 1, 2) is None
        assert store.find_sheet(1, 1, 1, 2) is not None

    def test_delete_only_sheet_restores_start_average(self, temp_data_dir):
        """Test a bowler whose only sheet is deleted goes back to their start average."""
        store = LeagueStore(temp_data_dir)
        home, away = week_rows(store, 1, [(1, (210, 210, 210))], [(4, (140, 140, 140))])
        store.save_sheet(1, 1, 1, 2, home, away)
        assert {p.id: p for p in store.load(1).players}[1].average == 210.0

        assert store.delete_sheet(1, 1, 1, 2) is True

        players = {p.id: p for p in store.load(1).players}
        assert players[1].average == 150.0
        assert players[1].hcp is None
        assert players[4].average == 140.0
        assert players[3].hcp == 28

    def test_validation_warnings_logged(self, temp_data_dir, caplog):
        store = LeagueStore(temp_data_dir)
        with caplog.at_level(logging.WARNING, logger='pinleague'):
            store.save_sheet(
                1, 1, 1, 2,
                [{'playerId': 1, 'g1': 320, 'g2': 150, 'g3': 150, 'hcp': 45}],
                [{'playerId': 3, 'g1': 150, 'g2': 150, 'g3': 150, 'hcp': 20}],
            )
        assert any('outside 0-300' in r.getMessage() for r in caplog.records)

    def test_standings_after_saves(self, temp_data_dir):
        store = LeagueStore(temp_data_dir)
        home, away = week_rows(
            store, 1,
            [(1, (150, 150, 150)), (2, (160, 160, 160))],
            [(3, (170, 170, 170)), (4, (140, 140, 140))],
        )
        store.save_sheet(1, 1, 1, 2, home, away)

        data = store.load(1)
        teams = build_team_standings(data.league, data.teams, data.matches, data.sheets)
        assert [(r.name, r.points) for r in teams] == [('Gutter Gang', 11), ('Strikers', 3)]

        groups = build_player_standings(
            data.league, data.players, data.teams, data.team_players, data.sheets
        )
        points = {p.name: p.stats.points for g in groups for p in g.players}
        assert points == {'Alex': 0, 'Blake': 3, 'Casey': 3, 'Drew': 0}
        # Individual points add up to the match's individual share
        assert sum(points.values()) == 6


class TestReportOutput:
    """Tests for the workbook export and the report CLI."""

    def test_workbook(self, temp_data_dir, tmp_path):
        store = LeagueStore(temp_data_dir)
        home, away = week_rows(store, 1, [(1, (150, 150, 150))], [(3, (170, 170, 170))])
        store.save_sheet(1, 1, 1, 2, home, away)
        data = store.load(1)

        teams = build_team_standings(data.league, data.teams, data.matches, data.sheets)
        groups = build_player_standings(
            data.league, data.players, data.teams, data.team_players, data.sheets
        )
        path = write_standings_workbook(tmp_path / 'out' / 'standings.xlsx', teams, groups, title='Week 1')

        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == ['Week 1', 'Bowlers']
        ws = wb['Week 1']
        assert ws.cell(row=1, column=2).value == 'Team'
        assert ws.cell(row=1, column=1).font.bold
        assert ws.max_row == 3
        assert wb['Bowlers'].max_row == 5
        wb.close()

    def test_cli(self, temp_data_dir, tmp_path, monkeypatch, capsys, reset_logging):
        store = LeagueStore(temp_data_dir)
        home, away = week_rows(store, 1, [(1, (150, 150, 150))], [(3, (170, 170, 170))])
        store.save_sheet(1, 1, 1, 2, home, away)

        xlsx = tmp_path / 'report.xlsx'
        log_file = tmp_path / 'logs' / 'report.log'
        monkeypatch.setattr(sys, 'argv', [
            'league_report.py', '--league', '1', '--data-dir', str(temp_data_dir),
            '--players', '--excel', str(xlsx), '--verbose', '--log-file', str(log_file),
        ])
        league_report.main()

        out = capsys.readouterr().out
        assert 'Tuesday Mixed' in out
        assert 'Strikers' in out
        assert 'Alex' in out
        assert xlsx.exists()
        assert 'pinleague.report' in log_file.read_text()

    def test_cli_missing_league(self, temp_data_dir, monkeypatch, reset_logging):
        monkeypatch.setattr(sys, 'argv', ['league_report.py', '--league', '5', '--data-dir', str(temp_data_dir)])
        with pytest.raises(SystemExit) as exc:
            league_report.main()
        assert exc.value.code == 1


class TestLoggingSetup:
    """Tests for the pinleague logger configuration."""

    @pytest.mark.parametrize('verbose,quiet,expected', [
        (False, False, logging.WARNING),
        (True, False, logging.DEBUG),
        (False, True, logging.ERROR),
        (True, True, logging.DEBUG),
    ])
    def test_level_for(self, verbose, quiet, expected):
        assert level_for(verbose, quiet) == expected

    def test_handlers_replaced(self, tmp_path, reset_logging):
        """Test calling setup twice doesn't stack handlers."""
        setup_logging(logging.INFO, log_file=tmp_path / 'a.log')
        logger = setup_logging(logging.INFO)
        assert len(logger.handlers) == 1

    def test_get_logger_names(self):
        assert get_logger().name == 'pinleague'
        assert get_logger('report').name == 'pinleague.report'
        assert get_logger('pinleague.store').name == 'pinleague.store'
