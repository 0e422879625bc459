"""Unit tests for sheet validation."""

from pinleague.schemas import BowlerRow, Player, Sheet
from pinleague.validators import validate_rows, validate_sheet


def make_sheet(home, away, week=1, home_team=1, away_team=2):
    return Sheet(
        week_number=week,
        home_team_id=home_team,
        away_team_id=away_team,
        home_games=home,
        away_games=away,
    )


PLAYERS = [Player(id=i, name=f'Bowler {i}') for i in range(1, 5)]


class TestSheetValidation:
    """Tests for sheet-level checks."""

    def test_valid_sheet(self):
        """Test that a normal sheet passes all checks."""
        sheet = make_sheet(
            [BowlerRow(player_id=1, g1=150, g2=160, g3=170, hcp=20)],
            [BowlerRow(player_id=2, g1=180, g2=190, g3=200, hcp=5)],
        )
        assert validate_sheet(sheet, PLAYERS) == []

    def test_same_team_both_sides(self):
        sheet = make_sheet([], [], home_team=3, away_team=3)
        warnings = validate_sheet(sheet)
        assert len(warnings) == 1
        assert 'both home and away' in warnings[0]

    def test_week_not_positive(self):
        warnings = validate_sheet(make_sheet([], [], week=0))
        assert warnings == ['Week number 0 is not positive']

    def test_duplicate_bowler(self):
        """Test a bowler on both sides is flagged."""
        sheet = make_sheet(
            [BowlerRow(player_id=1, g1=150, g2=150, g3=150)],
            [BowlerRow(player_id=1, g1=150, g2=150, g3=150)],
        )
        warnings = validate_sheet(sheet, PLAYERS)
        assert len(warnings) == 1
        assert 'more than once' in warnings[0]

    def test_blind_rows_may_repeat(self):
        sheet = make_sheet(
            [BowlerRow(player_id=1, g1=150, g2=150, g3=150)],
            [BowlerRow(player_id=1, g1=120, g2=120, g3=120, blind=True)],
        )
        assert validate_sheet(sheet, PLAYERS) == []

    def test_multiple_warnings(self):
        sheet = make_sheet(
            [BowlerRow(player_id=9, g1=310, g2=150, g3=150, hcp=-2)],
            [BowlerRow(g1=100, g2=100, g3=100)],
        )
        warnings = validate_sheet(sheet, PLAYERS)
        assert len(warnings) == 4


class TestRowValidation:
    """Tests for per-row checks."""

    def test_game_over_300(self):
        warnings = validate_rows('home', [BowlerRow(player_id=1, g1=301)], set())
        assert warnings == ['home row 1: g1 = 301 (outside 0-300)']

    def test_negative_handicap(self):
        warnings = validate_rows('away', [BowlerRow(player_id=1, hcp=-5)], set())
        assert warnings == ['away row 1: negative handicap -5']

    def test_unknown_player(self):
        warnings = validate_rows('home', [BowlerRow(player_id=7, g1=100)], {1, 2})
        assert warnings == ['home row 1: unknown player 7']

    def test_empty_slot(self):
        warnings = validate_rows('away', [BowlerRow(g1=100)], {1})
        assert warnings == ['away row 1 has no bowler']

    def test_blank_games_are_fine(self):
        assert validate_rows('home', [BowlerRow(player_id=1)], {1}) == []
